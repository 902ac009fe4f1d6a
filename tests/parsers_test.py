import hashlib
import unittest

from annotex.core.errors import InvalidContentError, MissingAnnotationsError, ResolverError
from annotex.models import DefaultBackend, IngressBackend, Resolved, Secret
from annotex.parsers.annotations import (
    AuthTLSParser,
    BasicDigestAuthParser,
    CORSParser,
    DefaultBackendParser,
    ExternalAuthParser,
    IPWhitelistParser,
    PortInRedirectParser,
    ProxyParser,
    RateLimitParser,
    RewriteParser,
    SessionAffinityParser,
)
from annotex.parsers.annotations.auth_external import External
from annotex.parsers.annotations.auth_tls import AuthSSLConfig
from annotex.parsers.annotations.base import (
    annotation_key,
    get_bool_annotation,
    get_int_annotation,
    get_string_annotation,
)
from annotex.parsers.annotations.proxy import ProxyConfig
from annotex.parsers.annotations.rate_limit import RateLimit, Zone
from annotex.parsers.annotations.rewrite import Redirect
from annotex.parsers.annotations.session_affinity import AffinityConfig

from stub_provider import ExplodingProvider, MockProvider, StaticProvider, build_ingress, sample_cert


def key(suffix):
    return annotation_key(suffix)


class TestValueHelpers(unittest.TestCase):
    def test_bool_is_strict(self):
        ing = build_ingress({key("flag"): "true", key("off"): "false", key("odd"): "TRUE"})
        self.assertTrue(get_bool_annotation(key("flag"), ing))
        self.assertFalse(get_bool_annotation(key("off"), ing))
        with self.assertRaises(InvalidContentError):
            get_bool_annotation(key("odd"), ing)
        with self.assertRaises(MissingAnnotationsError):
            get_bool_annotation(key("absent"), ing)

    def test_int_is_strict(self):
        ing = build_ingress({key("n"): "42", key("neg"): "-7", key("float"): "4.2", key("plus"): "+4",
                             key("newline"): "3\n", key("huge"): "9" * 5000,
                             key("overflow"): "9223372036854775808", key("max"): "9223372036854775807"})
        self.assertEqual(get_int_annotation(key("n"), ing), 42)
        self.assertEqual(get_int_annotation(key("neg"), ing), -7)
        self.assertEqual(get_int_annotation(key("max"), ing), 2 ** 63 - 1)
        for bad in ("float", "plus", "newline", "huge", "overflow"):
            with self.assertRaises(InvalidContentError):
                get_int_annotation(key(bad), ing)

    def test_string_rejects_blank(self):
        ing = build_ingress({key("blank"): "   ", key("ok"): " value "})
        self.assertEqual(get_string_annotation(key("ok"), ing), "value")
        with self.assertRaises(InvalidContentError):
            get_string_annotation(key("blank"), ing)

    def test_nil_annotations_are_missing(self):
        with self.assertRaises(MissingAnnotationsError):
            get_string_annotation(key("anything"), build_ingress(None))


class TestProxy(unittest.TestCase):
    def test_fields_default_independently(self):
        backend = DefaultBackend(proxy_connect_timeout=5, proxy_send_timeout=60, proxy_read_timeout=60,
                                 proxy_buffer_size="4k", proxy_body_size="1m")
        parser = ProxyParser(StaticProvider(backend=backend))
        ing = build_ingress({
            key("proxy-connect-timeout"): "15",
            key("proxy-read-timeout"): "soon",
            key("proxy-body-size"): "8m",
        })
        self.assertEqual(parser.resolve(ing), ProxyConfig(
            body_size="8m", connect_timeout=15, send_timeout=60, read_timeout=60, buffer_size="4k",
        ))

    def test_zero_backend_defaults(self):
        parser = ProxyParser(MockProvider())
        self.assertEqual(parser.resolve(build_ingress(None)), ProxyConfig())


class TestRateLimit(unittest.TestCase):
    def setUp(self):
        self.parser = RateLimitParser(MockProvider())

    def test_connection_zone(self):
        result = self.parser.resolve(build_ingress({key("limit-connections"): "2"}))
        self.assertEqual(result.connections, Zone(name="default_foo_conn", limit=2, burst=10, shared_size=5))
        self.assertEqual(result.rps, Zone())
        self.assertTrue(result.enabled)

    def test_both_zones(self):
        result = self.parser.resolve(build_ingress({key("limit-connections"): "1", key("limit-rps"): "20"}))
        self.assertEqual(result.rps, Zone(name="default_foo_rps", limit=20, burst=100, shared_size=5))

    def test_invalid_limits_disable(self):
        for value in ("-1", "0", "lots"):
            with self.subTest(value=value):
                result = self.parser.resolve(build_ingress({key("limit-rps"): value}))
                self.assertEqual(result, RateLimit())
                self.assertFalse(result.enabled)


class TestWhitelist(unittest.TestCase):
    def test_normalizes_and_sorts(self):
        parser = IPWhitelistParser(MockProvider())
        ing = build_ingress({key("whitelist-source-range"): "2001:db8::/32, 192.168.0.0/16,10.1.2.3/8,10.0.0.1"})
        self.assertEqual(
            parser.resolve(ing).cidrs,
            ["10.0.0.0/8", "10.0.0.1/32", "192.168.0.0/16", "2001:db8::/32"],
        )

    def test_invalid_entry_falls_back_to_backend(self):
        parser = IPWhitelistParser(StaticProvider(backend=DefaultBackend(whitelist_source_range=["172.16.0.0/12"])))
        ing = build_ingress({key("whitelist-source-range"): "10.0.0.0/8,10.0.0.0/33"})
        self.assertEqual(parser.resolve(ing).cidrs, ["172.16.0.0/12"])
        self.assertEqual(parser.resolve(build_ingress(None)).cidrs, ["172.16.0.0/12"])


class TestExternalAuth(unittest.TestCase):
    def setUp(self):
        self.parser = ExternalAuthParser(MockProvider())

    def test_valid_url(self):
        ing = build_ingress({
            key("auth-url"): "https://auth.example.com/verify",
            key("auth-method"): "POST",
            key("auth-send-body"): "true",
        })
        self.assertEqual(self.parser.resolve(ing), External(
            url="https://auth.example.com/verify", host="auth.example.com", method="POST", send_body=True,
        ))

    def test_invalid_inputs_default(self):
        for annotations in (
            {key("auth-url"): "ftp://auth.example.com"},
            {key("auth-url"): "http://"},
            {key("auth-url"): "auth.example.com/verify"},
            {key("auth-url"): "https://auth.example.com", key("auth-method"): "post"},
            None,
        ):
            with self.subTest(annotations=annotations):
                self.assertEqual(self.parser.resolve(build_ingress(annotations)), External())


class TestSessionAffinity(unittest.TestCase):
    def setUp(self):
        self.parser = SessionAffinityParser(MockProvider())

    def test_cookie_affinity(self):
        ing = build_ingress({key("affinity"): "cookie", key("session-cookie-name"): "route",
                             key("session-cookie-hash"): "sha1"})
        self.assertEqual(self.parser.resolve(ing), AffinityConfig("cookie", "route", "sha1"))

    def test_unknown_hash_uses_md5(self):
        ing = build_ingress({key("affinity"): "cookie", key("session-cookie-hash"): "sha256"})
        self.assertEqual(self.parser.resolve(ing), AffinityConfig("cookie", "INGRESSCOOKIE", "md5"))

    def test_unknown_affinity_defaults(self):
        self.assertEqual(self.parser.resolve(build_ingress({key("affinity"): "ip"})), AffinityConfig())


class TestRedirects(unittest.TestCase):
    def test_rewrite_with_backend_ssl_redirect(self):
        parser = RewriteParser(StaticProvider(backend=DefaultBackend(ssl_redirect=True)))
        self.assertEqual(parser.resolve(build_ingress(None)), Redirect(ssl_redirect=True))
        ing = build_ingress({key("rewrite-target"): "/", key("ssl-redirect"): "false", key("add-base-url"): "yes"})
        self.assertEqual(parser.resolve(ing), Redirect(target="/", add_base_url=False, ssl_redirect=False))

    def test_port_in_redirect_uses_backend_default(self):
        parser = PortInRedirectParser(StaticProvider(backend=DefaultBackend(use_port_in_redirects=True)))
        self.assertTrue(parser.resolve(build_ingress(None)))
        self.assertFalse(parser.resolve(build_ingress({key("use-port-in-redirects"): "false"})))
        self.assertTrue(parser.resolve(build_ingress({key("use-port-in-redirects"): "nope"})))

    def test_cors(self):
        parser = CORSParser(MockProvider())
        self.assertTrue(parser.resolve(build_ingress({key("enable-cors"): "true"})))
        self.assertFalse(parser.resolve(build_ingress({key("enable-cors"): "on"})))


class TestBasicDigestAuth(unittest.TestCase):
    CREDENTIALS = b"foo:$apr1$OFG3Xybp$ckL0FHDAkoXYIlH9.cysT0"

    def setUp(self):
        secret = Secret(name="basic", namespace="default", data={"auth": self.CREDENTIALS})
        empty = Secret(name="empty", namespace="default", data={"other": b"x"})
        self.provider = StaticProvider(secrets={"default/basic": secret, "default/empty": empty})
        self.parser = BasicDigestAuthParser(self.provider)

    def _annotations(self, **overrides):
        annotations = {key("auth-type"): "basic", key("auth-secret"): "basic", key("auth-realm"): "Restricted"}
        annotations.update({key(k.replace("_", "-")): v for k, v in overrides.items()})
        return build_ingress(annotations)

    def test_resolves_secret_in_resource_namespace(self):
        result = self.parser.resolve(self._annotations())
        self.assertTrue(result.ok)
        self.assertEqual(result.value.secret, "default/basic")
        self.assertEqual(result.value.realm, "Restricted")
        self.assertEqual(result.value.file_sha, hashlib.sha1(self.CREDENTIALS).hexdigest())
        self.assertIn(("secret", "default/basic"), self.provider.calls)

    def test_unset_is_empty_without_error(self):
        self.assertEqual(self.parser.resolve(build_ingress(None)), Resolved())

    def test_invalid_type(self):
        result = self.parser.resolve(self._annotations(auth_type="oauth"))
        self.assertIsNone(result.value)
        self.assertIsInstance(result.error, InvalidContentError)

    def test_missing_secret_annotation(self):
        ing = build_ingress({key("auth-type"): "digest"})
        self.assertIsInstance(self.parser.resolve(ing).error, InvalidContentError)

    def test_provider_failures_are_scoped(self):
        for auth_secret in ("missing", "empty"):
            with self.subTest(auth_secret=auth_secret):
                result = self.parser.resolve(self._annotations(auth_secret=auth_secret))
                self.assertIsNone(result.value)
                self.assertIsInstance(result.error, ResolverError)

    def test_none_and_exceptions_become_resolver_errors(self):
        result = BasicDigestAuthParser(MockProvider()).resolve(self._annotations())
        self.assertIsInstance(result.error, ResolverError)

        result = BasicDigestAuthParser(ExplodingProvider()).resolve(self._annotations())
        self.assertIsInstance(result.error, ResolverError)
        self.assertIsInstance(result.error.__cause__, ConnectionError)


class TestCertificateAuth(unittest.TestCase):
    def setUp(self):
        self.cert = sample_cert()
        self.parser = AuthTLSParser(StaticProvider(certs={"default/ca": self.cert}))

    def test_resolves_certificate(self):
        result = self.parser.resolve(build_ingress({key("auth-tls-secret"): "default/ca"}))
        self.assertEqual(result, Resolved(value=AuthSSLConfig(auth_ssl_cert=self.cert, validation_depth=1)))

    def test_verify_depth(self):
        for depth, expected in (("3", 3), ("0", 1), ("deep", 1)):
            with self.subTest(depth=depth):
                ing = build_ingress({key("auth-tls-secret"): "default/ca", key("auth-tls-verify-depth"): depth})
                self.assertEqual(self.parser.resolve(ing).value.validation_depth, expected)

    def test_malformed_secret_name(self):
        for name in ("ca", "default/", "a/b/c"):
            with self.subTest(name=name):
                result = self.parser.resolve(build_ingress({key("auth-tls-secret"): name}))
                self.assertIsInstance(result.error, InvalidContentError)

    def test_lookup_failures(self):
        ing = build_ingress({key("auth-tls-secret"): "default/other"})
        self.assertIsInstance(self.parser.resolve(ing).error, ResolverError)
        self.assertIsInstance(AuthTLSParser(MockProvider()).resolve(ing).error, ResolverError)
        self.assertIsInstance(AuthTLSParser(ExplodingProvider()).resolve(ing).error, ResolverError)


class TestDefaultBackend(unittest.TestCase):
    def setUp(self):
        self.parser = DefaultBackendParser(MockProvider())

    def test_spec_backend_without_override(self):
        ing = build_ingress(None)
        self.assertEqual(self.parser.resolve(ing), Resolved(value=ing.backend))

    def test_override(self):
        cases = [
            ("custom-svc", IngressBackend("custom-svc")),
            ("custom-svc:8080", IngressBackend("custom-svc", 8080)),
            ("custom-svc:http", IngressBackend("custom-svc", "http")),
        ]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                result = self.parser.resolve(build_ingress({key("default-backend"): raw}))
                self.assertEqual(result, Resolved(value=expected))

    def test_malformed_override_keeps_spec_backend(self):
        for raw in ("Bad_Name", "svc:", "  "):
            with self.subTest(raw=raw):
                ing = build_ingress({key("default-backend"): raw})
                result = self.parser.resolve(ing)
                self.assertEqual(result.value, ing.backend)
                self.assertIsInstance(result.error, InvalidContentError)


if __name__ == '__main__':
    unittest.main()
