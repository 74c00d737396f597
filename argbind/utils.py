"""
Small helpers shared by the descriptor, schema and binding layers.

- Unset: "argument not given" marker, distinct from None (None is a legal
  default for most declarations). Materialize it with coalesce().
- rename("name"): decorator fixing __name__/__qualname__ of generated functions.
- mirror("attr"): read-only property over self._attr, handing out frozen copies.
- pluralize / bulletize: text helpers behind fault titles and messages.
- mglob("pkg.**.commands"): module glob expansion used by schema discovery.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> bulletize("Unrecognized parameters provided:", ["extra"])
    'Unrecognized parameters provided:\\n- extra'
"""
import fnmatch
import importlib
import itertools
import pkgutil
import re
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance per process; it is falsy, survives copy and
    pickle as itself, and joins PEP 604 unions so "str | Unset" can be used
    directly with isinstance().
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if UnsetType._instance is None:
            UnsetType._instance = super().__new__(cls)
        return UnsetType._instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __or__(self, other, /):
        return UnsetType | other

    def __ror__(self, other, /):
        return other | UnsetType

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return default when object is Unset, object otherwise (falsy values included).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator: give a generated function a stable __name__ and __qualname__.

        >>> @rename("__repr__")
        ... def anything(self): ...
        >>> anything.__qualname__
        '__repr__'
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function, /):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _frozen(object):
    match object:
        case str() | bytes():
            return object
        case Mapping():
            return {key: _frozen(value) for key, value in object.items()}
        case Set():
            return frozenset(map(_frozen, object))
        case Sequence():
            return tuple(map(_frozen, object))
    return object


def mirror(name, /):
    """
    Read-only property exposing self._<name>.

    Lists and sets come back as tuples and frozensets (recursively) so callers
    cannot reach into the owner's state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    @rename(name)
    def getter(self):
        return _frozen(getattr(self, attribute))

    return property(getter)


_IRREGULAR_PLURALS = {
    "child": "children",
    "index": "indices",
    "person": "people",
}
_PLURAL_RULES = (
    (r"([^aeiou])y$", r"\1ies"),
    (r"(s|x|z|sh|ch)$", r"\1es"),
    (r"$", "s"),
)


def pluralize(text, /):
    """
    Pluralize the last word of an English phrase ("missing option" -> "missing options").

    Trailing whitespace and the casing of the word (lower, Title, UPPER) are kept.
    """
    if not isinstance(text, str):
        raise TypeError("pluralize() argument must be a string")

    head, word, tail = re.fullmatch(r"(.*?)(\S*)(\s*)", text, re.DOTALL).groups()
    if not word:
        return text

    lower = word.lower()
    if (plural := _IRREGULAR_PLURALS.get(lower)) is None:
        for pattern, replacement in _PLURAL_RULES:
            if (plural := re.sub(pattern, replacement, lower, count=1)) != lower:
                break

    if word.isupper():
        plural = plural.upper()
    elif word[0].isupper():
        plural = plural[0].upper() + plural[1:]
    return head + plural + tail


def bulletize(header, items, /):
    """
    Diagnostic layout: an explanation line followed by one "- item" line per item.

        >>> print(bulletize("Unrecognized options provided:", ["--foo", "-x"]))
        Unrecognized options provided:
        - --foo
        - -x
    """
    if not isinstance(header, str):
        raise TypeError("bulletize() first argument must be a string")
    return "\n".join([header, *("- %s" % item for item in items)])


def _match_segments(pattern, name):
    """
    Match dotted segments with fnmatch rules; "**" spans zero or more segments.
    """
    if not pattern:
        return not name
    head, *rest = pattern
    if head == "**":
        return any(_match_segments(rest, name[index:]) for index in range(len(name) + 1))
    return bool(name) and fnmatch.fnmatchcase(name[0], head) and _match_segments(rest, name[1:])


def mglob(source, /):
    """
    Expand a dotted module glob into module names.

    - "pkg.mod"          -> ["pkg.mod"] (no wildcard: returned untouched, not imported)
    - "pkg.*"            -> direct children of pkg
    - "pkg.**.commands"  -> every "commands" module below pkg (pkg.commands included)
    - segments accept fnmatch syntax (*, ?, [seq], [!seq]) and never span dots.

    The leading concrete segments name the package to walk; it is imported.
    An unimportable package yields []. Results are sorted.
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    segments = source.split(".")
    if not all(segments):
        raise ValueError("mglob() pattern cannot contain empty segments")

    concrete = list(itertools.takewhile(str.isidentifier, segments))
    if len(concrete) == len(segments):
        return [source]
    elif not concrete:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(concrete))
    except ImportError:
        return []

    candidates = [prefix]
    if hasattr(package, "__path__"):
        candidates += [module.name for module in pkgutil.walk_packages(package.__path__, prefix + ".")]
    return sorted(name for name in candidates if _match_segments(segments, name.split(".")))


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "pluralize",
    "bulletize",
    "mglob",
    "UnsetType",
    "Unset",
)
