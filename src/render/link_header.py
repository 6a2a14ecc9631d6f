"""
Link-Header Resolver: HTTP Link 헤더 → <link rel="stylesheet"> 태그 목록.

헤더 형식 (헤더 반복 또는 한 값에 쉼표로 여러 항목):
    https://cdn/a.css;rel=stylesheet, <https://cdn/b.js>; rel=preload

규칙:
- rel=stylesheet 인 항목만 유지 (대소문자 구분), 헤더 순서 유지
- 중복 제거 안 함
- 헤더 없음/빈 값 → 빈 목록
"""

from collections.abc import Iterable

STYLESHEET_REL = "stylesheet"


def stylesheet_tag(url: str) -> str:
    """stylesheet URL → <link> 태그 문자열."""
    return f'<link rel="stylesheet" href="{url.replace(chr(34), "%22")}">'


def split_link_entries(value: str) -> list[str]:
    """
    헤더 값 하나를 항목 단위로 분리.

    <...> 안의 쉼표는 구분자로 보지 않음.
    """
    entries: list[str] = []
    current: list[str] = []
    in_brackets = False

    for ch in value:
        if ch == "<":
            in_brackets = True
        elif ch == ">":
            in_brackets = False
        elif ch == "," and not in_brackets:
            entries.append("".join(current))
            current = []
            continue
        current.append(ch)

    entries.append("".join(current))
    return [entry.strip() for entry in entries if entry.strip()]


def parse_link_entry(entry: str) -> tuple[str, dict[str, str]]:
    """
    항목 하나 → (url, params).

    url은 <...>로 감싸져 있어도 되고 아니어도 됨.
    params 값의 따옴표는 제거. 같은 param이 반복되면 첫 번째 값 사용.
    """
    entry = entry.strip()
    if entry.startswith("<") and ">" in entry:
        close = entry.index(">")
        url = entry[1:close].strip()
        rest = entry[close + 1:]
    else:
        url, _, rest = entry.partition(";")
        url = url.strip()
        rest = ";" + rest

    params: dict[str, str] = {}
    for part in rest.split(";"):
        key, sep, param_value = part.partition("=")
        key = key.strip()
        if not key or not sep:
            continue
        params.setdefault(key, param_value.strip().strip('"'))

    return url, params


def is_stylesheet(params: dict[str, str]) -> bool:
    """rel 값(공백 구분 다중 relation 허용)에 stylesheet 포함 여부."""
    return STYLESHEET_REL in params.get("rel", "").split()


def resolve_stylesheet_links(values: str | Iterable[str] | None) -> list[str]:
    """
    Link 헤더 값들 → stylesheet 태그 목록.

    Args:
        values: 헤더 값 하나, 값 목록, 또는 None

    Returns:
        <link rel="stylesheet" href="..."> 문자열 목록 (헤더 순서)
    """
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]

    tags = []
    for value in values:
        for entry in split_link_entries(value):
            url, params = parse_link_entry(entry)
            if url and is_stylesheet(params):
                tags.append(stylesheet_tag(url))

    return tags
