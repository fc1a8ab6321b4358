"""
Unit Tests for the Handshake Validator
======================================
Decision order, freshness window and response encoding.
"""

import json

import pytest

from jsconnect import ClientConfig, HandshakeOutcome, JSConnect, SecurityMode
from jsconnect.handshake import JAVASCRIPT_CONTENT_TYPE, JSON_CONTENT_TYPE

from .conftest import NOW


def signed_request(connect, timestamp=NOW, security=True, **extra):
    params = connect.create_signed_request(timestamp=timestamp, security=security)
    params.update(extra)
    return params


class TestVerification:
    """Tests for the verification steps, in decision order."""
    
    def test_missing_client_id(self, connect, alice):
        result = connect.respond(alice, {})
        
        assert result.outcome == HandshakeOutcome.INVALID_REQUEST
        assert result.payload == {
            "error": "invalid_request",
            "message": "The client_id parameter is missing.",
        }
    
    def test_unknown_client(self, connect, alice):
        """Should name the offending client id."""
        result = connect.respond(alice, {"client_id": "wrong"})
        
        assert result.outcome == HandshakeOutcome.INVALID_CLIENT
        assert result.payload["error"] == "invalid_client"
        assert "wrong" in result.payload["message"]
    
    def test_public_query_returns_public_info(self, connect, alice):
        """Unsigned requests should only see name and photo."""
        body = connect.write(alice, {"client_id": "abc123"})
        
        assert body == '{"name":"Alice","photourl":"http://x/y.png"}'
    
    def test_public_query_without_photo(self, connect):
        """A missing photourl should default to an empty string."""
        body = connect.write({"Name": "Bob"}, {"client_id": "abc123"})
        
        assert json.loads(body) == {"name": "Bob", "photourl": ""}
    
    def test_public_query_anonymous(self, connect):
        result = connect.respond({}, {"client_id": "abc123"})
        
        assert result.outcome == HandshakeOutcome.PUBLIC_INFO
        assert result.payload == {"name": "", "photourl": ""}
    
    @pytest.mark.parametrize("timestamp", [None, "", "yesterday", "12abc"])
    def test_invalid_timestamp(self, connect, alice, timestamp):
        request = {"client_id": "abc123", "signature": "deadbeef"}
        if timestamp is not None:
            request["timestamp"] = timestamp
        
        result = connect.respond(alice, request)
        
        assert result.payload == {
            "error": "invalid_request",
            "message": "The timestamp parameter is missing or invalid.",
        }
    
    def test_missing_signature(self, connect, alice):
        result = connect.respond(alice, {"client_id": "abc123", "timestamp": str(NOW)})
        
        assert result.payload == {
            "error": "invalid_request",
            "message": "Missing signature parameter.",
        }
    
    @pytest.mark.parametrize("skew", [1441, -1441, 100000])
    def test_stale_timestamp_rejected(self, connect, alice, skew):
        """Timestamps outside the window should fail in both directions."""
        result = connect.respond(alice, signed_request(connect, NOW + skew))
        
        assert result.outcome == HandshakeOutcome.INVALID_REQUEST
        assert result.payload["message"] == "The timestamp is invalid."
    
    @pytest.mark.parametrize("skew", [1440, -1440, 0])
    def test_window_boundary_inclusive(self, connect, alice, skew):
        result = connect.respond(alice, signed_request(connect, NOW + skew))
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
    
    @pytest.mark.parametrize("skew", [1440, -1440])
    @pytest.mark.parametrize("fraction", [0.001, 0.5, 0.999])
    def test_window_boundary_with_fractional_clock(self, config, alice, skew, fraction):
        """Sub-second clock readings should not shift the window edge."""
        connect = JSConnect(config, clock=lambda: NOW + fraction)
        
        result = connect.respond(alice, signed_request(connect, NOW + skew))
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
    
    @pytest.mark.parametrize("skew", [1441, -1441])
    def test_stale_timestamp_with_fractional_clock(self, config, alice, skew):
        connect = JSConnect(config, clock=lambda: NOW + 0.5)
        
        result = connect.respond(alice, signed_request(connect, NOW + skew))
        
        assert result.payload["message"] == "The timestamp is invalid."
    
    def test_tampered_signature(self, connect, alice):
        """Flipping one character of the signature should deny access."""
        request = signed_request(connect)
        sig = request["signature"]
        request["signature"] = ("0" if sig[0] != "0" else "1") + sig[1:]
        
        result = connect.respond(alice, request)
        
        assert result.outcome == HandshakeOutcome.ACCESS_DENIED
        assert result.payload == {"error": "access_denied", "message": "Signature invalid."}
    
    def test_request_signature_known_value(self, connect):
        """Request signature is md5(timestamp + secret)."""
        request = connect.create_signed_request(timestamp=NOW)
        
        assert request == {
            "client_id": "abc123",
            "timestamp": "1700000000",
            "signature": "b1c1e07beb60deb6e2b20eae6b376856",
        }


class TestSignedResponse:
    """Tests for the signing step after verification."""
    
    def test_round_trip(self, connect, alice):
        """Signed profile should carry a signature that recomputes."""
        result = connect.respond(alice, signed_request(connect))
        payload = json.loads(result.body)
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
        assert payload["client_id"] == "abc123"
        assert payload["signature"] == connect.sign(alice)
        assert connect.signer.verify(payload, payload["signature"])
    
    def test_named_algorithm(self, connect, alice):
        """A string selector should verify and sign with that digest."""
        request = signed_request(connect, security="sha1")
        
        result = connect.respond(alice, request, "sha1")
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
        assert result.payload["signature"] == connect.sign(alice, "sha1")
        assert len(result.payload["signature"]) == 40
    
    def test_md5_request_rejected_in_sha1_mode(self, connect, alice):
        result = connect.respond(alice, signed_request(connect), "sha1")
        
        assert result.outcome == HandshakeOutcome.ACCESS_DENIED
    
    def test_anonymous_user_after_verification(self, connect):
        result = connect.respond({}, signed_request(connect))
        
        assert result.outcome == HandshakeOutcome.PUBLIC_INFO
        assert result.body == '{"name":"","photourl":""}'
    
    def test_unverified_mode_still_signs(self, connect, alice):
        """False skips verification but signs with MD5."""
        result = connect.respond(alice, {}, False)
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
        assert result.payload["signature"] == connect.sign(alice, True)
    
    def test_skip_mode_echoes_user(self, connect):
        """None skips both verification and signing."""
        user = {"Name": "Alice", "UniqueID": "42"}
        
        result = connect.respond(user, {}, None)
        
        assert result.outcome == HandshakeOutcome.UNSIGNED_PROFILE
        assert result.payload == {"name": "Alice", "uniqueid": "42"}
        assert "signature" not in result.payload
    
    def test_security_mode_instance_accepted(self, connect, alice):
        result = connect.respond(alice, {}, SecurityMode.skip())
        
        assert result.outcome == HandshakeOutcome.UNSIGNED_PROFILE
    
    def test_configured_default_algorithm(self, alice):
        """True should sign with the configured default digest."""
        connect = JSConnect(
            ClientConfig(client_id="abc123", secret="s3cret", hash_algorithm="sha256"),
            clock=lambda: NOW,
        )
        
        result = connect.respond(alice, signed_request(connect))
        
        assert result.outcome == HandshakeOutcome.SIGNED_PROFILE
        assert len(result.payload["signature"]) == 64


class TestCallbackWrapping:
    """Tests for JSONP response wrapping."""
    
    def test_callback_wraps_body(self, connect, alice):
        result = connect.respond(alice, {"client_id": "abc123", "callback": "cb"})
        
        assert result.body == 'cb({"name":"Alice","photourl":"http://x/y.png"})'
        assert result.content_type == JAVASCRIPT_CONTENT_TYPE
    
    def test_dotted_callback_allowed(self, connect, alice):
        body = connect.write(alice, {"client_id": "abc123", "callback": "jQuery.cb_1"})
        
        assert body.startswith("jQuery.cb_1(")
    
    def test_errors_are_wrapped_too(self, connect, alice):
        body = connect.write(alice, {"client_id": "wrong", "callback": "cb"})
        
        assert body == 'cb({"error":"invalid_client","message":"Unknown client wrong."})'
    
    def test_invalid_callback_rejected(self, connect, alice):
        """Callback names that are not identifiers should not wrap the body."""
        result = connect.respond(alice, {"client_id": "abc123", "callback": "alert(1);x"})
        
        assert result.outcome == HandshakeOutcome.INVALID_REQUEST
        assert result.content_type == JSON_CONTENT_TYPE
        assert result.payload["message"] == "Invalid callback alert(1);x."
        assert not result.body.startswith("alert")
