# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Static family configuration: which extractors run where, and in what order."""

from dataclasses import dataclass

from dcc.categorizer import CategoryRange, RangeTable, single_category
from dcc.extractor import Extractor
from dcc.extractors import (
    DescriptorFactoryExtractor,
    EnumCodeExtractor,
    HeadingDescriptorExtractor,
    MarkdownTableExtractor,
    ReleaseTableExtractor,
    ResourceExtractor,
    SourceScanExtractor,
    SymbolConstantExtractor,
)
from dcc.model import FamilyDescriptor
from dcc.reconciler import SourceRole

_DOTNET_DOCS_RAW = "https://raw.githubusercontent.com/dotnet/docs/main/docs"
_DIAGNOSTIC_SOURCES = ("*[Dd]iagnostic*.cs",)


@dataclass(frozen=True)
class ExtractionPass:
    """Describe one extractor run over a set of repository artifacts.

    Attributes:
        label: Short name used in logs.
        extractor: Extractor applied to every matched artifact.
        root: Repository-relative directory that is walked.
        patterns: Gitwildmatch patterns, relative to ``root``, selecting files.
        exclude: Gitwildmatch patterns removing files from the selection.
        role: Reconciliation role of this pass.
        related: Repository-relative companion files handed to the extractor.
    """

    label: str
    extractor: Extractor
    root: str
    patterns: tuple[str, ...]
    exclude: tuple[str, ...] = ()
    role: SourceRole = "merge"
    related: tuple[str, ...] = ()


@dataclass(frozen=True)
class FamilySpec:
    """Describe how one diagnostic family is collected.

    Attributes:
        prefix: Identifier namespace.
        repo: Repository name.
        description: Human description.
        pattern: Anchored identifier pattern.
        passes: Extraction passes in reconciliation order.
        categories: Range table labelling records still lacking a category.
        doc_url_template: Raw documentation URL; ``{id}`` is lower-cased,
            ``{ID}`` is kept as written.
        error_url_template: Error-message URL with the same placeholders.
        always_emit: Emit the family even when no records were found.
    """

    prefix: str
    repo: str
    description: str
    pattern: str
    passes: tuple[ExtractionPass, ...]
    categories: RangeTable | None = None
    doc_url_template: str | None = None
    error_url_template: str | None = None
    always_emit: bool = False

    @property
    def descriptor(self) -> FamilyDescriptor:
        return FamilyDescriptor(
            prefix=self.prefix,
            repo=self.repo,
            description=self.description,
            pattern=self.pattern,
        )


@dataclass(frozen=True)
class RepositorySpec:
    """Group the families collected from one repository."""

    name: str
    families: tuple[FamilySpec, ...]


def render_url(template: str | None, diagnostic_id: str) -> str | None:
    """Substitute an identifier into a URL template."""
    if template is None:
        return None
    return template.replace("{id}", diagnostic_id.lower()).replace("{ID}", diagnostic_id)


def id_pattern(prefix: str, width: int) -> str:
    return f"{prefix}\\d{{{width}}}"


def _anchored(prefix: str, width: int) -> str:
    return f"^{id_pattern(prefix, width)}$"


SYSLIB_CATEGORIES: RangeTable = (
    CategoryRange(1, 999, "Obsoletion"),
    CategoryRange(1001, 1999, "Analyzer"),
    CategoryRange(5001, 5999, "Experimental"),
)
MSB_CATEGORIES: RangeTable = (
    CategoryRange(1000, 1999, "CommandLine"),
    CategoryRange(2000, 2999, "Conversion"),
    CategoryRange(3000, 3999, "Task"),
    CategoryRange(4000, 4999, "Engine"),
    CategoryRange(5000, 5999, "Shared"),
    CategoryRange(6000, 6999, "Utilities"),
)
EF_CATEGORIES: RangeTable = (
    CategoryRange(1000, 7999, "Analyzer"),
    CategoryRange(8000, 8999, "Obsoletion"),
    CategoryRange(9000, 9999, "Experimental"),
)
RZ_CATEGORIES: RangeTable = (
    CategoryRange(0, 999, "General"),
    CategoryRange(1000, 1999, "Parsing"),
    CategoryRange(2000, 2999, "Semantic"),
    CategoryRange(3000, 3999, "SourceGenerator"),
    CategoryRange(9000, 9999, "Component"),
)


def _roslyn() -> RepositorySpec:
    return RepositorySpec(
        name="roslyn",
        families=(
            FamilySpec(
                prefix="CS",
                repo="roslyn",
                description="C# compiler errors and warnings",
                pattern=_anchored("CS", 4),
                passes=(
                    ExtractionPass(
                        label="ErrorCode.cs",
                        extractor=EnumCodeExtractor(prefix="CS", width=4),
                        root="src/Compilers/CSharp/Portable/Errors",
                        patterns=("/ErrorCode.cs",),
                        related=("src/Compilers/CSharp/Portable/CSharpResources.resx",),
                    ),
                ),
                doc_url_template=f"{_DOTNET_DOCS_RAW}/csharp/language-reference/compiler-messages/{{id}}.md",
                error_url_template="https://learn.microsoft.com/dotnet/csharp/language-reference/compiler-messages/{id}",
                always_emit=True,
            ),
        ),
    )


def _runtime() -> RepositorySpec:
    syslib = id_pattern("SYSLIB", 4)
    return RepositorySpec(
        name="runtime",
        families=(
            FamilySpec(
                prefix="SYSLIB",
                repo="runtime",
                description="Runtime obsoletions, analyzers, and experimental APIs",
                pattern=_anchored("SYSLIB", 4),
                passes=(
                    ExtractionPass(
                        label="list-of-diagnostics.md",
                        extractor=MarkdownTableExtractor(syslib, SYSLIB_CATEGORIES),
                        root="docs/project",
                        patterns=("/list-of-diagnostics.md",),
                    ),
                    ExtractionPass(
                        label="Obsoletions.cs",
                        extractor=SymbolConstantExtractor(syslib),
                        root="src/libraries/Common/src/System",
                        patterns=("/Obsoletions.cs",),
                    ),
                    ExtractionPass(
                        label="Experimentals.cs",
                        extractor=SymbolConstantExtractor(syslib),
                        root="src/libraries/Common/src/System",
                        patterns=("/Experimentals.cs",),
                    ),
                ),
                categories=SYSLIB_CATEGORIES,
                doc_url_template=f"{_DOTNET_DOCS_RAW}/fundamentals/syslib-diagnostics/{{id}}.md",
                error_url_template="https://aka.ms/dotnet-warnings/{id}",
                always_emit=True,
            ),
        ),
    )


def _sdk() -> RepositorySpec:
    return RepositorySpec(
        name="sdk",
        families=(
            FamilySpec(
                prefix="NETSDK",
                repo="sdk",
                description="SDK build and restore errors",
                pattern=_anchored("NETSDK", 4),
                passes=(
                    ExtractionPass(
                        label="Strings.resx",
                        extractor=ResourceExtractor(
                            id_pattern("NETSDK", 4), max_message_length=None
                        ),
                        root="src/Tasks/Common/Resources",
                        patterns=("/Strings.resx",),
                    ),
                ),
                categories=single_category("Build"),
                doc_url_template=f"{_DOTNET_DOCS_RAW}/core/tools/sdk-errors/{{id}}.md",
                error_url_template="https://learn.microsoft.com/dotnet/core/tools/sdk-errors/{id}",
            ),
            FamilySpec(
                prefix="CA",
                repo="sdk",
                description="Code analysis quality rules",
                pattern=_anchored("CA", 4),
                passes=(
                    ExtractionPass(
                        label="AnalyzerReleases.Shipped.md",
                        extractor=ReleaseTableExtractor(id_pattern("CA", 4)),
                        root="src/Microsoft.CodeAnalysis.NetAnalyzers",
                        patterns=("AnalyzerReleases.Shipped.md",),
                    ),
                ),
                doc_url_template=f"{_DOTNET_DOCS_RAW}/fundamentals/code-analysis/quality-rules/{{id}}.md",
                error_url_template="https://learn.microsoft.com/dotnet/fundamentals/code-analysis/quality-rules/{id}",
            ),
        ),
    )


def _aspnetcore_family(
    prefix: str,
    width: int,
    description: str,
    root: str,
    error_url_template: str = "https://aka.ms/aspnet/analyzers",
) -> FamilySpec:
    return FamilySpec(
        prefix=prefix,
        repo="aspnetcore",
        description=description,
        pattern=_anchored(prefix, width),
        passes=(
            ExtractionPass(
                label=f"{root}/*Diagnostic*.cs",
                extractor=SourceScanExtractor(id_pattern(prefix, width)),
                root=root,
                patterns=_DIAGNOSTIC_SOURCES,
            ),
        ),
        categories=single_category("Analyzer"),
        error_url_template=error_url_template,
    )


def _aspnetcore() -> RepositorySpec:
    return RepositorySpec(
        name="aspnetcore",
        families=(
            _aspnetcore_family(
                "ASP", 4, "ASP.NET Core framework analyzers", "src/Framework/AspNetCoreAnalyzers"
            ),
            _aspnetcore_family("BL", 4, "Blazor component diagnostics", "src/Components/Analyzers"),
            _aspnetcore_family("MVC", 4, "MVC analyzers", "src/Mvc/Mvc.Analyzers"),
            _aspnetcore_family("API", 4, "MVC API analyzers", "src/Mvc/Mvc.Api.Analyzers"),
            _aspnetcore_family(
                "RDG",
                3,
                "Request Delegate Generator diagnostics",
                "src/Http/Http.Extensions/gen",
                error_url_template=(
                    "https://learn.microsoft.com/aspnet/core/fundamentals/aot/"
                    "request-delegate-generator/diagnostics/{id}"
                ),
            ),
            _aspnetcore_family(
                "SSG",
                4,
                "SignalR Source Generator diagnostics",
                "src/SignalR/clients/csharp/Client.SourceGenerator",
            ),
        ),
    )


def _efcore() -> RepositorySpec:
    ef = id_pattern("EF", 4)
    return RepositorySpec(
        name="efcore",
        families=(
            FamilySpec(
                prefix="EF",
                repo="efcore",
                description="Entity Framework Core diagnostics",
                pattern=_anchored("EF", 4),
                passes=(
                    ExtractionPass(
                        label="EFDiagnostics.cs",
                        extractor=SourceScanExtractor(ef, EF_CATEGORIES, literals=False),
                        root="src/Shared",
                        patterns=("/EFDiagnostics.cs",),
                    ),
                    ExtractionPass(
                        label="AnalyzerReleases.Shipped.md",
                        extractor=ReleaseTableExtractor(ef, take_category=False),
                        root="src/EFCore.Analyzers",
                        patterns=("/AnalyzerReleases.Shipped.md",),
                        role="backfill",
                    ),
                ),
                categories=EF_CATEGORIES,
                error_url_template="https://learn.microsoft.com/ef/core/what-is-new/ef-core-9.0/breaking-changes",
                always_emit=True,
            ),
        ),
    )


def _aspire() -> RepositorySpec:
    return RepositorySpec(
        name="aspire",
        families=(
            FamilySpec(
                prefix="ASPIRE",
                repo="aspire",
                description="Aspire hosting and configuration diagnostics",
                pattern=_anchored("ASPIRE", 3),
                passes=(
                    ExtractionPass(
                        label="src/*Diagnostic*.cs",
                        extractor=SourceScanExtractor(
                            id_pattern("ASPIRE", 3), named_constants=False
                        ),
                        root="src",
                        patterns=_DIAGNOSTIC_SOURCES,
                    ),
                ),
                categories=single_category("Analyzer"),
                doc_url_template=(
                    "https://raw.githubusercontent.com/microsoft/aspire.dev/main/src/frontend/"
                    "src/content/docs/diagnostics/{id}.mdx"
                ),
                error_url_template="https://aka.ms/aspire/diagnostics/{ID}",
            ),
        ),
    )


_EXTENSIONS_FAMILIES: tuple[tuple[str, int, str, str], ...] = (
    ("LOGGEN", 3, "LoggerMessage source generator diagnostics", "Analyzer"),
    ("METGEN", 3, "Metrics source generator diagnostics", "Analyzer"),
    ("CTXOPTGEN", 3, "Contextual options generator diagnostics", "Analyzer"),
    ("EA", 4, "Extra analyzers", "Analyzer"),
    ("LA", 4, "Local analyzers", "Analyzer"),
    ("EXTEXP", 4, "Extensions experimental APIs", "Experimental"),
    ("EXTOBS", 4, "Extensions obsoletions", "Obsoletion"),
    ("MEAI", 3, "Microsoft Extensions AI experimental", "Analyzer"),
)


def _extensions() -> RepositorySpec:
    families: list[FamilySpec] = []
    for prefix, width, description, category in _EXTENSIONS_FAMILIES:
        pattern = id_pattern(prefix, width)
        families.append(
            FamilySpec(
                prefix=prefix,
                repo="extensions",
                description=description,
                pattern=_anchored(prefix, width),
                passes=(
                    ExtractionPass(
                        label="DiagnosticIds.cs",
                        extractor=SourceScanExtractor(pattern, literals=False),
                        root="src/Shared/DiagnosticIds",
                        patterns=("/DiagnosticIds.cs",),
                    ),
                    ExtractionPass(
                        label="DiagDescriptors.cs",
                        extractor=SourceScanExtractor(pattern, named_constants=False),
                        root="src",
                        patterns=("DiagDescriptors.cs",),
                        role="backfill",
                    ),
                ),
                categories=single_category(category),
                doc_url_template=(
                    "https://raw.githubusercontent.com/dotnet/extensions/main/docs/"
                    "list-of-diagnostics.md"
                ),
                error_url_template="https://aka.ms/dotnet-extensions-warnings/{ID}",
            )
        )
    return RepositorySpec(name="extensions", families=tuple(families))


def _msbuild() -> RepositorySpec:
    bc = id_pattern("BC", 4)
    return RepositorySpec(
        name="msbuild",
        families=(
            FamilySpec(
                prefix="MSB",
                repo="msbuild",
                description="MSBuild errors and warnings",
                pattern=_anchored("MSB", 4),
                passes=(
                    ExtractionPass(
                        label="Strings.resx",
                        extractor=ResourceExtractor(id_pattern("MSB", 4), MSB_CATEGORIES),
                        root="src",
                        patterns=("Strings.resx", "/Shared/Resources/Strings.shared.resx"),
                    ),
                ),
                categories=MSB_CATEGORIES,
                error_url_template="https://learn.microsoft.com/visualstudio/msbuild/errors/{id}",
            ),
            FamilySpec(
                prefix="BC",
                repo="msbuild",
                description="MSBuild BuildCheck diagnostics",
                pattern=_anchored("BC", 4),
                passes=(
                    ExtractionPass(
                        label="Codes.md",
                        extractor=HeadingDescriptorExtractor(bc, category="BuildCheck"),
                        root="documentation/specs/BuildCheck",
                        patterns=("/Codes.md",),
                    ),
                    ExtractionPass(
                        label="BuildCheck checks",
                        extractor=SourceScanExtractor(bc, named_constants=False),
                        root="src/Build/BuildCheck/Checks",
                        patterns=("/*.cs",),
                        role="backfill",
                    ),
                ),
                categories=single_category("BuildCheck"),
                error_url_template="https://learn.microsoft.com/visualstudio/msbuild/errors/{id}",
            ),
        ),
    )


def _razor() -> RepositorySpec:
    compiler = "src/Compiler/Microsoft.CodeAnalysis.Razor.Compiler/src"
    factories = (
        "/Language/RazorDiagnosticFactory.cs",
        "/Language/Components/ComponentDiagnosticFactory.cs",
        "/Mvc/RazorExtensionsDiagnosticFactory.cs",
    )
    return RepositorySpec(
        name="razor",
        families=(
            FamilySpec(
                prefix="RZ",
                repo="razor",
                description="Razor compiler and analyzer diagnostics",
                pattern=_anchored("RZ", 4),
                passes=(
                    ExtractionPass(
                        label="diagnostic factories",
                        extractor=DescriptorFactoryExtractor("RZ", 4, RZ_CATEGORIES),
                        root=compiler,
                        patterns=factories,
                    ),
                    ExtractionPass(
                        label="src/*Diagnostic*.cs",
                        extractor=SourceScanExtractor(
                            id_pattern("RZ", 4),
                            single_category("Analyzer"),
                            named_constants=False,
                        ),
                        root="src",
                        patterns=_DIAGNOSTIC_SOURCES,
                        exclude=(
                            "RazorDiagnosticFactory.cs",
                            "ComponentDiagnosticFactory.cs",
                            "RazorExtensionsDiagnosticFactory.cs",
                        ),
                        role="backfill",
                    ),
                ),
                categories=RZ_CATEGORIES,
            ),
        ),
    )


REPOSITORIES: tuple[RepositorySpec, ...] = (
    _roslyn(),
    _runtime(),
    _sdk(),
    _aspnetcore(),
    _efcore(),
    _aspire(),
    _extensions(),
    _msbuild(),
    _razor(),
)


def repository_names() -> list[str]:
    return [repository.name for repository in REPOSITORIES]


def get_repository(name: str) -> RepositorySpec:
    """Look up a repository specification by name.

    Raises:
        KeyError: If no repository with that name is configured.
    """
    for repository in REPOSITORIES:
        if repository.name == name:
            return repository
    raise KeyError(f"Unknown repository: {name}")
