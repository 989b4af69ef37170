from festival.core.exceptions import (
    AppError,
    CapacityExceededError,
    ConfigurationError,
    InstanceFormatError,
    InstanceTooLargeError,
    UnknownItemError,
)

def test_instance_format_error_structure():
    err = InstanceFormatError(message="Bad input", details={"token_index": 4})
    assert err.status_code == 400
    assert err.message == "Bad input"
    assert err.details == {"token_index": 4}
    assert isinstance(err, AppError)

def test_unknown_item_is_an_input_error():
    err = UnknownItemError("Nosferatu")
    assert isinstance(err, InstanceFormatError)
    assert err.details == {"film": "Nosferatu"}
    assert "Nosferatu" in str(err)

def test_capacity_and_configuration_errors():
    assert CapacityExceededError(0, 2).status_code == 409
    assert ConfigurationError("broken").status_code == 500

def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}

def test_instance_too_large_error_structure():
    err = InstanceTooLargeError("exhaustive", 41, 40)
    assert err.status_code == 422
    assert err.details == {"strategy": "exhaustive", "films": 41, "limit": 40}
    assert "40" in err.message
