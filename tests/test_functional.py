import sys

import pytest

from nucleikit.functional import main, run_functional_tests, run_individual_test_case


def _make_binary(path, count):
    path.write_text(f"#!{sys.executable}\nprint('Templates loaded: {count}')\n")
    path.chmod(0o755)
    return str(path)


@pytest.fixture
def binaries(tmp_path):
    main_bin = _make_binary(tmp_path / "main", 5)
    same_bin = _make_binary(tmp_path / "same", 5)
    other_bin = _make_binary(tmp_path / "other", 6)
    return main_bin, same_bin, other_bin


def _write_cases(tmp_path, text):
    path = tmp_path / "cases.txt"
    path.write_text(text)
    return str(path)


def test_individual_case_equal_counts(binaries):
    main_bin, same_bin, _ = binaries
    assert run_individual_test_case(main_bin, same_bin, "nuclei -t x") is None


def test_individual_case_different_counts(binaries):
    main_bin, _, other_bin = binaries
    with pytest.raises(RuntimeError, match="main is not equal to") as info:
        run_individual_test_case(main_bin, other_bin, "nuclei -t x")
    assert "5" in str(info.value) and "6" in str(info.value)


def test_individual_case_missing_binary(binaries, tmp_path):
    main_bin, _, _ = binaries
    with pytest.raises(RuntimeError, match="could not run nuclei dev test"):
        run_individual_test_case(main_bin, str(tmp_path / "absent"), "nuclei")


def test_functional_tests_all_pass(binaries, tmp_path, capsys):
    main_bin, same_bin, _ = binaries
    cases = _write_cases(tmp_path, "nuclei -t a\n\n   \nnuclei -t b\n")
    assert run_functional_tests(main_bin, same_bin, cases) is True
    out = capsys.readouterr().out
    assert out.count("passed!") == 2


def test_functional_tests_failure_reported(binaries, tmp_path, capsys):
    main_bin, _, other_bin = binaries
    cases = _write_cases(tmp_path, "nuclei -t a\n")
    assert run_functional_tests(main_bin, other_bin, cases) is False
    assert 'Test "nuclei -t a" failed' in capsys.readouterr().err


def test_functional_tests_missing_file(binaries, tmp_path):
    main_bin, same_bin, _ = binaries
    with pytest.raises(RuntimeError, match="could not open test cases"):
        run_functional_tests(main_bin, same_bin, str(tmp_path / "missing.txt"))


def test_main_exit_codes(binaries, tmp_path):
    main_bin, same_bin, other_bin = binaries
    cases = _write_cases(tmp_path, "nuclei -t a\n")
    assert main(["-main", main_bin, "-dev", same_bin, "-testcases", cases]) == 0
    assert main(["-main", main_bin, "-dev", other_bin, "-testcases", cases]) == 1


def test_main_missing_testcases(binaries, tmp_path, capsys):
    main_bin, same_bin, _ = binaries
    code = main(["-main", main_bin, "-dev", same_bin, "-testcases", str(tmp_path / "none")])
    assert code == 1
    assert "Could not run functional tests" in capsys.readouterr().err