"""
Parser for the enable-cors annotation.
"""

from annotex.parsers.annotations.base import BoolAnnotation


class CORSParser(BoolAnnotation):
    name = "EnableCORS"
    suffix = "enable-cors"
