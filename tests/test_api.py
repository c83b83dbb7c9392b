"""
HTTP API tests
"""
import base64

from totp_backend.routes import ACCOUNTS_EXTENSION

from .conftest import EXAMPLE_URI, RFC_URI_SHA1


def _add(client, uri):
    response = client.post("/api/accounts", json={"uri": uri})
    assert response.status_code == 201
    return response.get_json()


class TestIndex:
    def test_lists_endpoints(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.get_json()
        assert data["name"] == "totp-tiles"
        assert "GET /api/codes" in data["endpoints"]

    def test_cors_header(self, client):
        response = client.get("/api/accounts", headers={"Origin": "http://localhost:3000"})
        assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:3000")


class TestAccounts:
    def test_add_account(self, client):
        data = _add(client, EXAMPLE_URI)
        assert data["issuer"] == "Example"
        assert data["account_name"] == "alice@example.com"
        assert data["digits"] == 6
        assert data["period"] == 30
        assert "secret" not in data
        assert data["id"]

    def test_list_in_insertion_order(self, client):
        first = _add(client, RFC_URI_SHA1)
        second = _add(client, EXAMPLE_URI)
        data = client.get("/api/accounts").get_json()
        assert [a["id"] for a in data["accounts"]] == [first["id"], second["id"]]

    def test_rejected_scan_is_not_stored(self, client):
        response = client.post("/api/accounts", json={"uri": "otpauth://totp/Foo:bar?issuer=Foo"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "MissingSecret"
        assert client.get("/api/accounts").get_json()["accounts"] == []

    def test_unsupported_type(self, client):
        response = client.post("/api/accounts", json={"uri": "otpauth://hotp/Foo:bar?secret=JBSWY3DPEHPK3PXP"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "UnsupportedType"

    def test_invalid_digits(self, client):
        response = client.post("/api/accounts", json={"uri": "otpauth://totp/x?secret=JBSWY3DPEHPK3PXP&digits=10"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidDigits"

    def test_non_string_uri(self, client):
        response = client.post("/api/accounts", json={"uri": 42})
        assert response.status_code == 400
        assert response.get_json()["error"] == "MalformedURI"

    def test_missing_uri(self, client):
        assert client.post("/api/accounts", json={}).status_code == 400
        assert client.post("/api/accounts", json=["otpauth://totp/x"]).status_code == 400
        assert client.post("/api/accounts", data="not json").status_code == 400

    def test_delete(self, client):
        account = _add(client, EXAMPLE_URI)
        response = client.delete(f"/api/accounts/{account['id']}")
        assert response.status_code == 200
        assert response.get_json() == {"deleted": account["id"]}
        assert client.delete(f"/api/accounts/{account['id']}").status_code == 404

    def test_apps_do_not_share_accounts(self, app, client):
        from totp_backend import create_app
        from totp_backend.config import TestConfig

        _add(client, EXAMPLE_URI)
        other = create_app(TestConfig).test_client()
        assert other.get("/api/accounts").get_json()["accounts"] == []


class TestCodes:
    def test_snapshot_at_fixed_time(self, client):
        rfc = _add(client, RFC_URI_SHA1)
        _add(client, EXAMPLE_URI)

        data = client.get("/api/codes?at=59").get_json()

        assert data["at"] == 59
        assert len(data["tiles"]) == 2
        tile = data["tiles"][0]
        assert tile["id"] == rfc["id"]
        assert tile["code"] == "94287082"
        assert tile["remaining"] == 1
        assert tile["expiring"] is True
        assert "secret" not in tile

    def test_snapshot_uses_clock_by_default(self, client, monkeypatch):
        _add(client, RFC_URI_SHA1)
        monkeypatch.setattr("totp_backend.routes.time.time", lambda: 1111111109.4)
        data = client.get("/api/codes").get_json()
        assert data["at"] == 1111111109
        assert data["tiles"][0]["code"] == "07081804"

    def test_invalid_time(self, client):
        rfc = _add(client, RFC_URI_SHA1)
        too_big = "9" * 30
        response = client.get(f"/api/accounts/{rfc['id']}/code?at={too_big}")
        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidTime"
        for value in ("-1", "abc", "1.5", "", "9" * 30, "\u0661\u0662"):
            response = client.get(f"/api/codes?at={value}")
            assert response.status_code == 400
            assert response.get_json()["error"] == "InvalidTime"

    def test_single_account_code(self, client):
        rfc = _add(client, RFC_URI_SHA1)
        data = client.get(f"/api/accounts/{rfc['id']}/code?at=1234567890").get_json()
        assert data["code"] == "89005924"
        assert data["remaining"] == 30 - (1234567890 % 30)
        assert data["at"] == 1234567890

    def test_single_account_unknown(self, client):
        assert client.get("/api/accounts/missing/code").status_code == 404

    def test_corrupt_credential_is_a_server_error(self, app, client):
        account = _add(client, EXAMPLE_URI)
        stored = app.extensions[ACCOUNTS_EXTENSION].get(account["id"])
        object.__setattr__(stored.credential, "secret", "!!!")

        response = client.get(f"/api/accounts/{account['id']}/code?at=59")

        assert response.status_code == 500
        assert response.get_json()["error"] == "CorruptCredential"


class TestQrExport:
    def test_png_data_uri(self, client):
        account = _add(client, EXAMPLE_URI)
        data = client.get(f"/api/accounts/{account['id']}/qr").get_json()
        prefix = "data:image/png;base64,"
        assert data["id"] == account["id"]
        assert data["qr_code"].startswith(prefix)
        png = base64.b64decode(data["qr_code"][len(prefix):])
        assert png.startswith(b"\x89PNG")

    def test_unknown_account(self, client):
        assert client.get("/api/accounts/missing/qr").status_code == 404


class TestParseEndpoint:
    def test_valid(self, client):
        response = client.post("/api/parse", json={"uri": "otpauth://totp/SoloName?secret=JBSWY3DPEHPK3PXP"})
        assert response.status_code == 200
        data = response.get_json()
        assert data["valid"] is True
        assert data["credential"]["issuer"] == "SoloName"
        assert data["credential"]["account_name"] == "SoloName"
        assert client.get("/api/accounts").get_json()["accounts"] == []

    def test_invalid(self, client):
        response = client.post("/api/parse", json={"uri": "otpauth://totp/x?secret=JBSW1"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidSecretEncoding"
