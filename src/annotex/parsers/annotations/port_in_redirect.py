"""
Parser for the use-port-in-redirects annotation.

Defaults to the provider's backend setting instead of False.
"""

from annotex.models import Ingress
from annotex.parsers.annotations.base import IngressAnnotation, get_bool_annotation


class PortInRedirectParser(IngressAnnotation):
    name = "UsePortInRedirects"

    def parse(self, ing: Ingress) -> bool:
        return get_bool_annotation(self.key("use-port-in-redirects"), ing)

    def default(self, ing: Ingress) -> bool:
        return self.backend_defaults().use_port_in_redirects
