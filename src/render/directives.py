"""
Directive Scanner: 템플릿 본문 → include directive 목록.

문법:
    <include id="header" src="https://host/fragment" timeout="500" />

규칙:
- 태그 이름은 대소문자 무시, 뒤에 공백 또는 '/'가 와야 함 (<includes> 등은 무시)
- 속성 사이 / '=' 주변 공백은 개수 제한 없음
- 값은 "..." 또는 '...' 로 감싸야 함
- 반드시 '/>' 로 닫혀야 함
- 같은 속성이 반복되면 첫 번째 값 사용 (HTML과 동일)
- id 없으면 "" (표시용, 중복 허용)
- src 없음 / timeout이 음이 아닌 정수가 아님 → DirectiveParseError
"""

import html
import re
from collections.abc import Iterator

from src.domain.errors import DirectiveParseError
from src.domain.schemas import IncludeDirective

TAG_NAME = "include"
TAG_OPEN = "<" + TAG_NAME
SELF_CLOSE = "/>"

# timeout 속성 없을 때 기본값 (ms)
DEFAULT_TIMEOUT_MS = 1000

_TAG_OPEN_PATTERN = re.compile(re.escape(TAG_OPEN), re.IGNORECASE | re.ASCII)
_TIMEOUT_PATTERN = re.compile(r"[0-9]+")
_NAME_EXTRA_CHARS = frozenset("-_:.")


def _is_name_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in _NAME_EXTRA_CHARS)


# =============================================================================
# Tag Reader
# =============================================================================

class _TagReader:
    """
    '<include' 바로 뒤부터 '/>'까지 속성을 하나씩 읽는 토큰 스캐너.

    상태: content + 현재 위치(pos). 한 태그만 읽고 버림.
    """

    def __init__(self, content: str, tag_start: int) -> None:
        self.content = content
        self.tag_start = tag_start
        self.pos = tag_start + len(TAG_OPEN)

    def error(self, message: str, **context: object) -> DirectiveParseError:
        return DirectiveParseError(
            message=message,
            position=self.tag_start,
            **context,
        )

    def read(self) -> tuple[dict[str, str], int]:
        """
        속성 dict와 태그 끝 offset(exclusive) 반환.

        Raises:
            DirectiveParseError: 닫히지 않은 태그, 따옴표 없는 값 등
        """
        attributes: dict[str, str] = {}

        while True:
            self._skip_whitespace()

            if self.pos >= len(self.content):
                raise self.error("unterminated include tag")

            if self.content.startswith(SELF_CLOSE, self.pos):
                return attributes, self.pos + len(SELF_CLOSE)

            if self.content[self.pos] == ">":
                raise self.error("include tag must be self-closing")

            name = self._read_name()
            self._skip_whitespace()

            if self.pos >= len(self.content) or self.content[self.pos] != "=":
                raise self.error("attribute has no value", attribute=name)
            self.pos += 1
            self._skip_whitespace()

            value = self._read_quoted(name)
            attributes.setdefault(name, value)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.content) and self.content[self.pos].isspace():
            self.pos += 1

    def _read_name(self) -> str:
        start = self.pos
        while self.pos < len(self.content) and _is_name_char(self.content[self.pos]):
            self.pos += 1

        if self.pos == start:
            raise self.error(
                "unexpected character in include tag",
                character=self.content[self.pos],
            )
        return self.content[start:self.pos].lower()

    def _read_quoted(self, name: str) -> str:
        if self.pos >= len(self.content):
            raise self.error("unterminated include tag")

        quote = self.content[self.pos]
        if quote not in ("'", '"'):
            raise self.error("attribute value must be quoted", attribute=name)

        end = self.content.find(quote, self.pos + 1)
        if end == -1:
            raise self.error("unterminated attribute value", attribute=name)

        value = self.content[self.pos + 1:end]
        self.pos = end + 1
        return value


# =============================================================================
# Attribute Rules
# =============================================================================

def parse_timeout(value: str | None, default: int, position: int) -> int:
    """
    timeout 속성 → 밀리초 정수.

    Args:
        value: 속성 원문 (None이면 default)
        default: 속성 없을 때 사용할 값
        position: 에러 컨텍스트용 태그 위치

    Raises:
        DirectiveParseError: 음이 아닌 정수가 아닐 때
    """
    if value is None:
        return default

    invalid = DirectiveParseError(
        message="timeout must be a non-negative integer",
        position=position,
        attribute="timeout",
        value=value[:32],
    )
    if not _TIMEOUT_PATTERN.fullmatch(value.strip()):
        raise invalid

    try:
        return int(value.strip())
    except ValueError:
        # int 변환 자릿수 제한 초과
        raise invalid from None


def _build_directive(
    content: str,
    start: int,
    end: int,
    attributes: dict[str, str],
    default_timeout: int,
) -> IncludeDirective:
    src = html.unescape(attributes.get("src", "")).strip()
    if not src:
        raise DirectiveParseError(
            message="include tag requires a src attribute",
            position=start,
            attribute="src",
        )

    return IncludeDirective(
        id=attributes.get("id", ""),
        src=src,
        timeout=parse_timeout(attributes.get("timeout"), default_timeout, start),
        start=start,
        end=end,
        raw=content[start:end],
    )


# =============================================================================
# Scanner
# =============================================================================

def scan_directives(
    content: str,
    default_timeout: int = DEFAULT_TIMEOUT_MS,
) -> Iterator[IncludeDirective]:
    """
    템플릿 본문에서 include directive를 문서 순서대로 찾음.

    외부 상태가 없으므로 같은 content → 항상 같은 결과.
    generator이므로 한 번만 순회 가능.

    Args:
        content: 템플릿 원문
        default_timeout: timeout 속성이 없을 때 사용할 값 (ms)

    Yields:
        IncludeDirective (start/end는 원문 offset)

    Raises:
        DirectiveParseError: 속성이 잘못된 include 태그를 만났을 때
    """
    pos = 0

    while True:
        match = _TAG_OPEN_PATTERN.search(content, pos)
        if match is None:
            return
        start = match.start()

        after = start + len(TAG_OPEN)
        if after < len(content) and not (
            content[after].isspace() or content[after] == "/"
        ):
            # <includes>, <include-foo> 등 다른 태그
            pos = after
            continue

        attributes, end = _TagReader(content, start).read()
        yield _build_directive(content, start, end, attributes, default_timeout)
        pos = end
