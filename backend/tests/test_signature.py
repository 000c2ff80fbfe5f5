import pytest

from tweetfleet.errors import AuthenticationError
from tweetfleet.signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, SignatureVerifier

NOW = 1_700_000_000
SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
BODY = b'{"type":"event_callback","event":{"type":"message","text":"!esi"}}'


def _verifier(secret: str = SECRET) -> SignatureVerifier:
    return SignatureVerifier(secret, tolerance_seconds=300, clock=lambda: NOW)


def _headers(verifier: SignatureVerifier, body: bytes = BODY, timestamp: int = NOW) -> dict[str, str]:
    return {
        TIMESTAMP_HEADER: str(timestamp),
        SIGNATURE_HEADER: verifier.sign(body, timestamp),
    }


def test_sign_matches_slack_documented_example():
    verifier = SignatureVerifier(SECRET)
    body = (
        b"token=xyzz0WbapA4vBCDEFasx0q6G&team_id=T1DC2JH3J&team_domain=testteamnow&channel_id=G8PSS9T3V"
        b"&channel_name=foobar&user_id=U2CERLKJA&user_name=roadrunner&command=%2Fwebhook-collect&text="
        b"&response_url=https%3A%2F%2Fhooks.slack.com%2Fcommands%2FT1DC2JH3J%2F397700885554%2F96rGlfmibIGlgcZRskXaIFfN"
        b"&trigger_id=398738663015.47445629121.803a0bc887a14d10d2c447fce8b6703c"
    )

    assert verifier.sign(body, "1531420618") == (
        "v0=a2114d57b48eac39b9ad189dd8316235a7b4a8d21a10bd27519666489c69b503"
    )


def test_verify_accepts_fresh_untampered_request():
    verifier = _verifier()

    verifier.verify(_headers(verifier), BODY)


def test_verify_rejects_missing_signature():
    verifier = _verifier()
    headers = _headers(verifier)
    del headers[SIGNATURE_HEADER]

    with pytest.raises(AuthenticationError, match="X-Slack-Signature"):
        verifier.verify(headers, BODY)


def test_verify_rejects_missing_timestamp():
    verifier = _verifier()
    headers = _headers(verifier)
    del headers[TIMESTAMP_HEADER]

    with pytest.raises(AuthenticationError, match="X-Slack-Request-Timestamp"):
        verifier.verify(headers, BODY)


def test_verify_rejects_non_numeric_timestamp():
    verifier = _verifier()
    headers = _headers(verifier)
    headers[TIMESTAMP_HEADER] = "yesterday"

    with pytest.raises(AuthenticationError):
        verifier.verify(headers, BODY)


@pytest.mark.parametrize("skew", [-301, 301, -3600])
def test_verify_rejects_stale_timestamp(skew):
    verifier = _verifier()
    headers = _headers(verifier, timestamp=NOW + skew)

    with pytest.raises(AuthenticationError, match="window"):
        verifier.verify(headers, BODY)


def test_verify_rejects_tampered_body():
    verifier = _verifier()
    headers = _headers(verifier)

    with pytest.raises(AuthenticationError, match="does not match"):
        verifier.verify(headers, BODY.replace(b"!esi", b"!tq"))


def test_verify_rejects_other_secret():
    verifier = _verifier()
    headers = _headers(_verifier("another-secret"))

    with pytest.raises(AuthenticationError):
        verifier.verify(headers, BODY)


def test_verify_rejects_when_secret_unconfigured():
    verifier = _verifier("")

    with pytest.raises(AuthenticationError, match="not configured"):
        verifier.verify(_headers(_verifier()), BODY)


@pytest.mark.parametrize("signature", ["v0=é", "v0=☃", "v0=\udcff"])
def test_verify_rejects_non_ascii_signature(signature):
    verifier = _verifier()
    headers = _headers(verifier)
    headers[SIGNATURE_HEADER] = signature

    with pytest.raises(AuthenticationError, match="does not match"):
        verifier.verify(headers, BODY)
