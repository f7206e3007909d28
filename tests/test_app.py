from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from services.evaluation import build_default_service
from settings import get_settings

SECRET_HEADER = "x-device-shared-secret"
VALID_SECRET = "secret-ABC-123-XYZ-001"
FIRMWARE_ERROR = "The firmware value does not match semantic versioning format."


@pytest.fixture
def api_client(monkeypatch) -> Iterator[TestClient]:
    for name in ("DEVICE_SECRETS", "DEVICE_SECRETS_FILE", "DEVICE_SECRET_HEADER"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    build_default_service.cache_clear()

    app = create_app()
    with TestClient(app) as client:
        yield client

    build_default_service.cache_clear()
    get_settings.cache_clear()


def _evaluate(
    client: TestClient,
    secret: str | None = VALID_SECRET,
    firmware: str = "1.0.0",
    humidity: float = 50,
    temperature: float = 20,
):
    headers = {SECRET_HEADER: secret} if secret is not None else {}
    return client.post(
        "/readings/evaluate",
        headers=headers,
        json={
            "firmwareVersion": firmware,
            "humidity": humidity,
            "temperature": temperature,
        },
    )


def _alert_types(response) -> list[str]:
    return [alert["alertType"] for alert in response.json()]


@pytest.mark.parametrize(
    ("secret", "expected_status"),
    [
        ("secret-ABC-123-XYZ-001", 200),
        ("secret-ABC-123-XYZ-002", 200),
        ("secret-ABC-123-XYZ-003", 200),
        ("secret-ABC-123-XYZ-001-invalid", 401),
        ("secret-ABC-123-XYZ-002-invalid", 401),
        ("secret-ABC-123-XYZ-003-invalid", 401),
        ("bad", 401),
        ("", 401),
        (None, 401),
    ],
)
def test_status_code_follows_secret_validity(
    api_client: TestClient, secret: str | None, expected_status: int
) -> None:
    response = _evaluate(api_client, secret=secret)

    assert response.status_code == expected_status


def test_unauthorized_returns_problem_details(api_client: TestClient) -> None:
    response = _evaluate(api_client, secret="bad", firmware="not-a-version")

    assert response.status_code == 401
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["status"] == 401
    assert body["title"] == "Unauthorized"
    assert body["detail"] == "Device secret is not within the valid range."


@pytest.mark.parametrize("firmware", ["1.0.0", "1.0.1", "0.0.1-BETA", "10.3.10"])
def test_valid_firmware_is_accepted(api_client: TestClient, firmware: str) -> None:
    response = _evaluate(api_client, firmware=firmware)

    assert response.status_code == 200


@pytest.mark.parametrize("firmware", ["1.0.0.1", "something", "1", "1.0", "a.b.c", ".."])
def test_invalid_firmware_returns_validation_problem(
    api_client: TestClient, firmware: str
) -> None:
    response = _evaluate(api_client, firmware=firmware, humidity=0, temperature=0)

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["status"] == 400
    assert body["title"] == "One or more validation errors occurred."
    assert body["errors"] == {"FirmwareVersion": [FIRMWARE_ERROR]}


@pytest.mark.parametrize(("humidity", "temperature"), [(60, 15), (70, 25), (90, 35), (50, 20)])
def test_values_in_range_return_empty_list(
    api_client: TestClient, humidity: int, temperature: int
) -> None:
    response = _evaluate(api_client, humidity=humidity, temperature=temperature)

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize(
    ("humidity", "expect_humidity", "temperature", "expect_temperature"),
    [
        (50, False, -50, True),
        (50, False, 200, True),
        (-1, True, 20, False),
        (200, True, 20, False),
        (-1, True, -50, True),
    ],
)
def test_out_of_range_values_raise_alerts(
    api_client: TestClient,
    humidity: int,
    expect_humidity: bool,
    temperature: int,
    expect_temperature: bool,
) -> None:
    response = _evaluate(api_client, humidity=humidity, temperature=temperature)

    assert response.status_code == 200
    alert_types = _alert_types(response)
    assert ("HumidityOutOfRange" in alert_types) is expect_humidity
    assert ("TemperatureOutOfRange" in alert_types) is expect_temperature


def test_alert_payload_shape(api_client: TestClient) -> None:
    response = _evaluate(api_client, humidity=-1, temperature=-50)

    assert response.json() == [
        {"alertType": "HumidityOutOfRange", "message": "Humidity sensor is out of range."},
        {"alertType": "TemperatureOutOfRange", "message": "Temperature sensor is out of range."},
    ]


@pytest.mark.parametrize(
    ("humidity", "temperature", "expected"),
    [
        (0, -10, []),
        (100, 50, []),
        (-1, 20, ["HumidityOutOfRange"]),
        (101, 20, ["HumidityOutOfRange"]),
        (50, -11, ["TemperatureOutOfRange"]),
        (50, 51, ["TemperatureOutOfRange"]),
        (100.5, 49.5, ["HumidityOutOfRange"]),
    ],
)
def test_boundary_values(
    api_client: TestClient, humidity: float, temperature: float, expected: list[str]
) -> None:
    response = _evaluate(api_client, humidity=humidity, temperature=temperature)

    assert _alert_types(response) == expected


def test_non_numeric_temperature_is_rejected_before_evaluation(api_client: TestClient) -> None:
    response = api_client.post(
        "/readings/evaluate",
        headers={SECRET_HEADER: "bad"},
        json={"firmwareVersion": "1.0.0", "humidity": 50, "temperature": "warm"},
    )

    assert response.status_code == 400
    body = response.json()
    assert list(body["errors"]) == ["Temperature"]


def test_missing_fields_are_reported_per_field(api_client: TestClient) -> None:
    response = api_client.post(
        "/readings/evaluate",
        headers={SECRET_HEADER: VALID_SECRET},
        json={"temperature": 20},
    )

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"FirmwareVersion", "Humidity"}


def test_invalid_json_body_is_rejected(api_client: TestClient) -> None:
    response = api_client.post(
        "/readings/evaluate",
        headers={SECRET_HEADER: VALID_SECRET, "content-type": "application/json"},
        content=b"{not json",
    )

    assert response.status_code == 400
    assert "$" in response.json()["errors"]


def test_configured_secret_header_and_allow_list(monkeypatch) -> None:
    monkeypatch.setenv("DEVICE_SECRETS", "device-42")
    monkeypatch.setenv("DEVICE_SECRET_HEADER", "X-Device-Token")
    get_settings.cache_clear()
    build_default_service.cache_clear()

    try:
        with TestClient(create_app()) as client:
            payload = {"firmwareVersion": "1.0.0", "humidity": 50, "temperature": 20}
            accepted = client.post(
                "/readings/evaluate", headers={"X-Device-Token": "device-42"}, json=payload
            )
            rejected = client.post(
                "/readings/evaluate", headers={SECRET_HEADER: VALID_SECRET}, json=payload
            )
    finally:
        build_default_service.cache_clear()
        get_settings.cache_clear()

    assert accepted.status_code == 200
    assert rejected.status_code == 401


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/health").json() == {"status": "ok"}
    assert api_client.get("/").json()["status"] == "ok"


def test_openapi_documents_evaluate_endpoint(api_client: TestClient) -> None:
    schema = api_client.get("/openapi.json").json()

    operation = schema["paths"]["/readings/evaluate"]["post"]
    assert {"200", "400", "401"} <= set(operation["responses"])


@pytest.mark.parametrize(
    ("humidity", "temperature", "expected"),
    [
        ("50", "50.0000000000000001", ["TemperatureOutOfRange"]),
        ("50", "-10.0000000000000001", ["TemperatureOutOfRange"]),
        ("100.0000000000000001", "20", ["HumidityOutOfRange"]),
        ("-0.0000000000000001", "20", ["HumidityOutOfRange"]),
        ("50", "50.0000000000000000", []),
        ("1E+2", "-1.0E+1", []),
    ],
)
def test_fractional_values_are_compared_exactly(
    api_client: TestClient, humidity: str, temperature: str, expected: list[str]
) -> None:
    body = (
        f'{{"firmwareVersion": "1.0.0", "humidity": {humidity}, '
        f'"temperature": {temperature}}}'
    )
    response = api_client.post(
        "/readings/evaluate",
        headers={SECRET_HEADER: VALID_SECRET, "content-type": "application/json"},
        content=body.encode("utf-8"),
    )

    assert response.status_code == 200
    assert _alert_types(response) == expected


def test_openapi_documents_secret_header(api_client: TestClient) -> None:
    schema = api_client.get("/openapi.json").json()

    operation = schema["paths"]["/readings/evaluate"]["post"]
    header_names = [
        parameter["name"] for parameter in operation["parameters"] if parameter["in"] == "header"
    ]
    assert header_names == [SECRET_HEADER]
    assert f"`{SECRET_HEADER}`" in operation["description"]
    assert "requestBody" in operation


def test_openapi_follows_configured_secret_header(monkeypatch) -> None:
    monkeypatch.setenv("DEVICE_SECRET_HEADER", "X-Device-Token")
    get_settings.cache_clear()
    build_default_service.cache_clear()

    try:
        with TestClient(create_app()) as client:
            schema = client.get("/openapi.json").json()
    finally:
        build_default_service.cache_clear()
        get_settings.cache_clear()

    operation = schema["paths"]["/readings/evaluate"]["post"]
    assert [parameter["name"] for parameter in operation["parameters"]] == ["x-device-token"]
    assert "`x-device-token`" in operation["description"]
    assert SECRET_HEADER not in operation["description"]
