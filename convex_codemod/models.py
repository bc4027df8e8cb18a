"""Data models for the function reference codemod."""

import json
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Iterator, Literal

RewriteKind = Literal["react", "server"] | None

DEFAULT_API_ALIAS = "api"
DEFAULT_FUNCTION_NAME = "default"
GENERATED_API_FRAGMENT = "/_generated/api"
GENERATED_API_PLACEHOLDER = "ADDED_BY_CODEMOD_REPLACE_ME_GENERATED_API_IMPORT"

# Strings that look like "<prefix>:<name>" but are really URLs
URL_SCHEMES = ("http://", "https://")


@dataclass(frozen=True)
class FunctionReference:
    """A function identified by its module path and exported name."""

    module_path: tuple[str, ...]
    function_name: str = DEFAULT_FUNCTION_NAME

    @classmethod
    def parse(cls, value: str) -> "FunctionReference":
        """Parse an old-style string reference like "dir/module:name".

        Only the first ":" separates the module from the function name.
        A reference without ":" points at the module's default export.
        """
        module, sep, name = value.partition(":")
        return cls(
            module_path=tuple(module.split("/")),
            function_name=name if sep else DEFAULT_FUNCTION_NAME,
        )

    def parts(self) -> list[str]:
        """Module segments followed by the function name."""
        return [*self.module_path, self.function_name]

    def __str__(self) -> str:
        return f"{'/'.join(self.module_path)}:{self.function_name}"


class ReferenceCatalog:
    """Known function reference prefixes for one project."""

    def __init__(self, prefixes=()):
        self._prefixes = tuple(dict.fromkeys(prefixes))

    def __iter__(self) -> Iterator[str]:
        return iter(self._prefixes)

    def __len__(self) -> int:
        return len(self._prefixes)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._prefixes

    def __repr__(self) -> str:
        return f"ReferenceCatalog({list(self._prefixes)!r})"

    def match(self, value: str) -> str | None:
        """Return the catalog prefix that `value` references, if any.

        A value references prefix `p` when it equals `p` or starts with
        `p:`. When several prefixes qualify the longest one wins.
        """
        if value.startswith(URL_SCHEMES):
            return None
        best = None
        for prefix in self._prefixes:
            if value == prefix or value.startswith(f"{prefix}:"):
                if best is None or len(prefix) > len(best):
                    best = prefix
        return best

    def is_reference(self, value: str) -> bool:
        return self.match(value) is not None


@dataclass(frozen=True)
class ImportSpec:
    """A named import binding: `imported_name as local_name`."""

    imported_name: str
    local_name: str | None = None

    @property
    def binding(self) -> str:
        return self.local_name or self.imported_name

    def render(self) -> str:
        if self.local_name is None or self.local_name == self.imported_name:
            return self.imported_name
        return f"{self.imported_name} as {self.local_name}"


class AliasMap:
    """Member name -> every local alias it was imported under.

    e.g. `import { useQuery as useConvexQuery }` gives
    `{"useQuery": ["useConvexQuery"]}`. Aliases keep first-seen order and
    are never duplicated.
    """

    def __init__(self):
        self._aliases: defaultdict[str, list[str]] = defaultdict(list)

    def add(self, name: str, alias: str | None = None) -> None:
        alias = alias or name
        aliases = self._aliases[name]
        if alias not in aliases:
            aliases.append(alias)

    def __bool__(self) -> bool:
        return any(self._aliases.values())

    def __getitem__(self, name: str) -> list[str]:
        return list(self._aliases.get(name, ()))

    def __contains__(self, name: object) -> bool:
        return bool(self._aliases.get(name))

    def specifiers(self) -> list[ImportSpec]:
        return [
            ImportSpec(name, alias)
            for name, aliases in self._aliases.items()
            for alias in aliases
        ]

    def local_names(self) -> set[str]:
        return {alias for aliases in self._aliases.values() for alias in aliases}


@dataclass(frozen=True)
class GeneratedImportRule:
    """Which members move from a generated module to a library module."""

    path_fragment: str
    members: tuple[str, ...]
    target_path: str


# Hooks exported by `/_generated/react` before `api` existed
GENERATED_REACT_MEMBERS = (
    "useQuery",
    "useMutation",
    "useAction",
    "usePaginatedQuery",
    "useQueries",
)

# Exports of `/_generated/server` that now live in `convex/server`
GENERATED_SERVER_MEMBERS = ("cronJobs",)

IMPORT_RULES: dict[str, GeneratedImportRule] = {
    "react": GeneratedImportRule(
        path_fragment="/_generated/react",
        members=GENERATED_REACT_MEMBERS,
        target_path="convex/react",
    ),
    "server": GeneratedImportRule(
        path_fragment="/_generated/server",
        members=GENERATED_SERVER_MEMBERS,
        target_path="convex/server",
    ),
}


@dataclass
class RewriteOptions:
    """Per-file rewrite configuration."""

    kind: RewriteKind = None
    function_prefixes: ReferenceCatalog | list[str] = field(default_factory=list)
    convex_api_alias: str = DEFAULT_API_ALIAS
    generated_api_import: str | None = None
    dialect: str = "tsx"
    match_all_literals: bool = False

    def __post_init__(self):
        if self.kind not in (None, *IMPORT_RULES):
            raise ValueError(f"Unknown rewrite kind: {self.kind!r}")
        if not isinstance(self.function_prefixes, ReferenceCatalog):
            self.function_prefixes = ReferenceCatalog(self.function_prefixes)

    @property
    def catalog(self) -> ReferenceCatalog:
        return self.function_prefixes

    @property
    def import_rule(self) -> GeneratedImportRule | None:
        return IMPORT_RULES.get(self.kind) if self.kind else None


@dataclass
class RewriteError:
    """A file that could not be rewritten."""

    path: str
    error: str
    phase: str  # "parse", "imports", "render", "io"


@dataclass
class FileResult:
    """Outcome of rewriting a single file."""

    path: str
    kind: str  # "react", "server", "generic"
    changed: bool


@dataclass
class MigrationResult:
    """Complete result of migrating a project."""

    project: str
    functions_dir: str
    function_prefixes: list[str]
    files: list[FileResult]
    errors: list[RewriteError]
    dry_run: bool = False

    @property
    def changed_files(self) -> list[str]:
        return [f.path for f in self.files if f.changed]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "project": self.project,
            "functions_dir": self.functions_dir,
            "function_prefixes": self.function_prefixes,
            "dry_run": self.dry_run,
            "changed": self.changed_files,
            "files": [asdict(f) for f in self.files],
            "errors": [asdict(e) for e in self.errors],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
