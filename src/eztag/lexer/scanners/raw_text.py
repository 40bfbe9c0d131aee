"""Raw-text (script and style) state scanner mixin."""

from __future__ import annotations

import re

from eztag.lexer.modes import ScannerState
from eztag.tokens import TokenKind

_SCRIPT_MARKER_RE = re.compile(r"<!--|-->|</?script\s*/?>?", re.IGNORECASE)
_STYLE_END_RE = re.compile(r"</style", re.IGNORECASE)

# Script sub-states for comment-escaped content, see
# https://html.spec.whatwg.org/multipage/scripting.html#restrictions-for-contents-of-script-elements
_SCRIPT_DATA = 1
_SCRIPT_ESCAPED = 2  # inside <!--
_SCRIPT_DOUBLE_ESCAPED = 3  # inside <!-- <script>


class RawTextScannerMixin:
    """Mixin providing scanning for ``<script>`` and ``<style>`` content.

    Raw text is emitted as a single SCRIPT / STYLES token covering
    everything up to the element's end tag, or up to end of input when the
    end tag is missing.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _state: ScannerState

    def _eos(self) -> bool:
        raise NotImplementedError

    def _finish_token(
        self, offset: int, kind: TokenKind, error: str | None = None
    ) -> TokenKind:
        raise NotImplementedError

    def _internal_scan(self) -> TokenKind:
        raise NotImplementedError

    def _scan_script_content(self, offset: int) -> TokenKind:
        """Scan script text, ignoring ``</script>`` inside escaped comments."""
        script_state = _SCRIPT_DATA
        while not self._eos():
            match = _SCRIPT_MARKER_RE.search(self._source, self._pos)
            if match is None:
                self._pos = self._source_len
                return self._finish_token(offset, TokenKind.SCRIPT)

            self._pos = match.end()
            marker = match.group()
            if marker == "<!--":
                if script_state == _SCRIPT_DATA:
                    script_state = _SCRIPT_ESCAPED
            elif marker == "-->":
                script_state = _SCRIPT_DATA
            elif marker[1] != "/":  # <script
                if script_state == _SCRIPT_ESCAPED:
                    script_state = _SCRIPT_DOUBLE_ESCAPED
            elif script_state == _SCRIPT_DOUBLE_ESCAPED:  # </script
                script_state = _SCRIPT_ESCAPED
            else:
                # back to the beginning of the closing tag
                self._pos = match.start()
                break

        self._state = ScannerState.CONTENT
        if offset < self._pos:
            return self._finish_token(offset, TokenKind.SCRIPT)
        # no advance yet - jump to CONTENT
        return self._internal_scan()

    def _scan_style_content(self, offset: int) -> TokenKind:
        """Scan style text up to ``</style`` (case-insensitive)."""
        match = _STYLE_END_RE.search(self._source, self._pos)
        self._pos = match.start() if match is not None else self._source_len
        self._state = ScannerState.CONTENT
        if offset < self._pos:
            return self._finish_token(offset, TokenKind.STYLES)
        # no advance yet - jump to CONTENT
        return self._internal_scan()
