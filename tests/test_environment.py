from bessie.utils.environment import (
    EnvironmentValidator,
    ValidationResult,
    require_valid_environment,
)


def test_all_checks_pass():
    validator = EnvironmentValidator()
    assert validator.run_all_checks()
    names = [check.name for check in validator.get_checks()]
    assert names == ["Python Version", "BLAKE3 Backend", "Cryptography Backend"]
    assert all(check.result is ValidationResult.PASS for check in validator.get_checks())


def test_report_lists_checks():
    validator = EnvironmentValidator()
    validator.run_all_checks()
    report = validator.format_report()
    assert "[✓] BLAKE3 Backend: blake3" in report


def test_require_valid_environment():
    assert require_valid_environment()
