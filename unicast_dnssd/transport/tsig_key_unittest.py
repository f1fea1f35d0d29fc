import dns.name
import dns.tsig
import pytest

from unicast_dnssd.errors import InvalidArgumentError
from unicast_dnssd.transport.tsig_key import TsigKey

SECRET = "c2VjcmV0LWtleS1ieXRlcw=="


class TestTsigKey:
    @pytest.mark.parametrize(
        "algorithm, expected",
        [
            ("hmac-md5", "hmac-md5.sig-alg.reg.int."),
            ("HMAC-MD5.SIG-ALG.REG.INT.", "hmac-md5.sig-alg.reg.int."),
            ("hmac-sha1", "hmac-sha1."),
            ("hmac-sha1.", "hmac-sha1."),
            ("HMAC-SHA256", "hmac-sha256."),
        ],
    )
    def test_algorithm_aliases(self, algorithm, expected):
        assert TsigKey("key.", algorithm, SECRET).algorithm == expected

    def test_unsupported_algorithm(self):
        with pytest.raises(InvalidArgumentError):
            TsigKey("key.", "hmac-sha512", SECRET)

    def test_invalid_secret(self):
        with pytest.raises(InvalidArgumentError):
            TsigKey("key.", "hmac-sha256", "not base64!")

    def test_empty_name(self):
        with pytest.raises(InvalidArgumentError):
            TsigKey("", "hmac-sha256", SECRET)

    @pytest.mark.parametrize(
        "name, algorithm, secret",
        [
            (None, "hmac-md5", SECRET),
            ("key.", None, SECRET),
            ("key.", "hmac-md5", None),
            ("", "hmac-md5", SECRET),
            ("key.", "hmac-md5", ""),
        ],
    )
    def test_create_with_missing_field_disables_signing(
        self, name, algorithm, secret
    ):
        assert TsigKey.create(name, algorithm, secret) is None

    def test_create(self):
        key = TsigKey.create("key.", "hmac-sha1", SECRET)
        assert key == TsigKey("key.", "hmac-sha1", SECRET)

    def test_to_dnspython_key(self):
        key = TsigKey("update-key.", "hmac-sha256", SECRET).to_dnspython_key()
        assert isinstance(key, dns.tsig.Key)
        assert key.name == dns.name.from_text("update-key.")
        assert key.algorithm == dns.tsig.HMAC_SHA256

    def test_repr_hides_secret(self):
        assert SECRET not in repr(TsigKey("key.", "hmac-md5", SECRET))
