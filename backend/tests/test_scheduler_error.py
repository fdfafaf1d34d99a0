from app.core.exceptions import AppError, ResourceNotFoundError, SchedulerError


def test_scheduler_error_structure():
    err = SchedulerError(message="Test error", details={"foo": "bar"})
    assert err.status_code == 400
    assert err.message == "Test error"
    assert err.details == {"foo": "bar"}
    assert isinstance(err, AppError)


def test_app_error_defaults():
    err = AppError("Generic error")
    assert err.status_code == 500
    assert err.details == {}


def test_resource_not_found_message():
    err = ResourceNotFoundError("Timetable", "abc")
    assert err.status_code == 404
    assert err.message == "Timetable with id abc not found"
