"""Tests for transform resolution and safe invocation.

Inline source must never be evaluated, and no transform failure may
escape into parsing or expansion.
"""

from __future__ import annotations

import logging
import os
import string

import pytest

from eztag.errors import TransformError
from eztag.registry.transforms import apply_transform, load_transform, resolve_transform


def _write(path, body: str):  # type: ignore[no-untyped-def]
    path.write_text(body, encoding="utf-8")
    return path


class TestResolveTransform:
    def test_registered_name_comes_first(self) -> None:
        fn = resolve_transform("string:capwords", registered={"string:capwords": str.upper})
        assert fn is str.upper

    def test_file_with_transform_entry_point(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        _write(tmp_path / "shout.py", "def transform(text):\n    return text.upper()\n")
        fn = resolve_transform("shout.py", registered={}, base_dir=tmp_path)
        assert fn("hi") == "HI"

    def test_file_with_callme_entry_point(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        path = _write(tmp_path / "legacy.py", "def callme(text):\n    return text[::-1]\n")
        fn = resolve_transform(str(path), registered={})
        assert fn("abc") == "cba"

    def test_file_without_entry_point(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        _write(tmp_path / "empty.py", "VALUE = 1\n")
        with pytest.raises(TransformError, match="no transform or callme"):
            resolve_transform("empty.py", registered={}, base_dir=tmp_path)

    def test_missing_file(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(TransformError, match="file not found"):
            resolve_transform("missing.py", registered={}, base_dir=tmp_path)

    def test_file_that_fails_to_load(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        _write(tmp_path / "broken.py", "raise RuntimeError('nope')\n")
        with pytest.raises(TransformError, match="failed to load"):
            resolve_transform("broken.py", registered={}, base_dir=tmp_path)

    def test_import_reference(self) -> None:
        assert resolve_transform("string:capwords", registered={}) is string.capwords

    def test_import_reference_missing_module(self) -> None:
        with pytest.raises(TransformError, match="cannot import"):
            resolve_transform("no_such_module_eztag:fn", registered={})

    def test_import_reference_missing_attribute(self) -> None:
        with pytest.raises(TransformError, match="no callable"):
            resolve_transform("string:not_there", registered={})

    @pytest.mark.parametrize(
        "reference",
        ["builtins:eval", "builtins:exec", "os:system", "subprocess:run", "os.path:join"],
    )
    def test_process_and_interpreter_modules_are_refused(self, reference: str) -> None:
        with pytest.raises(TransformError, match="not allowed"):
            resolve_transform(reference, registered={})

    def test_reexported_callable_is_refused(self) -> None:
        # shlex imports StringIO from io
        with pytest.raises(TransformError, match="not defined in"):
            resolve_transform("shlex:StringIO", registered={})

    def test_builtin_entry_point_in_file_is_refused(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        _write(tmp_path / "sneaky.py", "transform = eval\n")
        with pytest.raises(TransformError, match="refused module"):
            resolve_transform("sneaky.py", registered={}, base_dir=tmp_path)

    def test_file_module_runs_once(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        marker = tmp_path / "loads.txt"
        _write(
            tmp_path / "counted.py",
            f"with open({str(marker)!r}, 'a') as f:\n"
            "    f.write('x')\n"
            "def transform(text):\n"
            "    return text\n",
        )
        first = resolve_transform("counted.py", registered={}, base_dir=tmp_path)
        second = resolve_transform("counted.py", registered={}, base_dir=tmp_path)
        assert first is second
        assert marker.read_text() == "x"

    def test_edited_file_is_reloaded(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        path = _write(tmp_path / "edited.py", "def transform(text):\n    return 'a'\n")
        assert resolve_transform(str(path), registered={})("") == "a"

        _write(path, "def transform(text):\n    return 'b'\n")
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))
        assert resolve_transform(str(path), registered={})("") == "b"

    @pytest.mark.parametrize(
        "source",
        [
            "lambda s: s.upper()",
            "def transform(s):\n    return s",
            "__import__('os').system('true')",
        ],
    )
    def test_inline_source_is_refused(self, source: str) -> None:
        with pytest.raises(TransformError, match="not evaluated"):
            resolve_transform(source, registered={})

    def test_inline_source_has_no_side_effects(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        marker = tmp_path / "ran"
        source = f"open({str(marker)!r}, 'w').close()"
        with pytest.raises(TransformError):
            resolve_transform(source, registered={})
        assert not marker.exists()

    def test_empty_reference(self) -> None:
        with pytest.raises(TransformError, match="empty"):
            resolve_transform("  ", registered={})

    def test_error_carries_reference(self) -> None:
        with pytest.raises(TransformError) as exc_info:
            resolve_transform("lambda: 0", registered={})
        assert exc_info.value.reference == "lambda: 0"


class TestLoadTransform:
    def test_no_reference(self) -> None:
        assert load_transform(None, registered={}) is None
        assert load_transform("", registered={}) is None

    def test_failure_is_logged_and_unavailable(self, caplog) -> None:  # type: ignore[no-untyped-def]
        with caplog.at_level(logging.WARNING, logger="eztag"):
            assert load_transform("lambda s: s", registered={}) is None
        assert "not evaluated" in caplog.text

    def test_success(self) -> None:
        assert load_transform("shout", registered={"shout": str.upper}) is str.upper


class TestApplyTransform:
    def test_result(self) -> None:
        assert apply_transform(str.upper, "hello") == "HELLO"

    def test_unavailable(self) -> None:
        assert apply_transform(None, "hello") is None

    def test_exception_is_unavailable(self, caplog) -> None:  # type: ignore[no-untyped-def]
        def boom(text: str) -> str:
            raise ValueError(text)

        with caplog.at_level(logging.WARNING, logger="eztag"):
            assert apply_transform(boom, "x") is None
        assert "failed" in caplog.text

    def test_non_string_result_is_unavailable(self) -> None:
        assert apply_transform(lambda text: len(text), "abc") is None  # type: ignore[arg-type, return-value]

    def test_empty_string_result_is_kept(self) -> None:
        assert apply_transform(lambda text: "", "abc") == ""
