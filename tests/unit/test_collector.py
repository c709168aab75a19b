# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the collection pipeline over repository checkouts."""

from collections.abc import Callable
from pathlib import Path

from dcc.collector import ArtifactMatcher, Collector
from dcc.config import CollectorConfig
from dcc.extractors import SourceScanExtractor
from dcc.families import ExtractionPass, get_repository
from dcc.model import DiagnosticRecord, Family

WriteFile = Callable[[Path, str], Path]


def _resx(*entries: tuple[str, str]) -> str:
    data = "\n".join(
        f'  <data name="{name}" xml:space="preserve"><value>{value}</value></data>'
        for name, value in entries
    )
    return f"<?xml version=\"1.0\" encoding=\"utf-8\"?>\n<root>\n{data}\n</root>\n"


def _by_prefix(families: list[Family]) -> dict[str, Family]:
    return {family.prefix: family for family in families}


def test_col_001_runtime_merges_markdown_and_constants(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "docs/project/list-of-diagnostics.md",
        "\n".join(
            [
                "| Diagnostic ID | Description |",
                "| --- | --- |",
                "|  __`SYSLIB0001`__ | The UTF-7 encoding is insecure. |",
                "|  __`SYSLIB0002`__ | _reserved_ |",
                "|  __`SYSLIB1001`__ | Logging method names cannot start with _ |",
            ]
        ),
    )
    write_file(
        tmp_path / "src/libraries/Common/src/System/Obsoletions.cs",
        "\n".join(
            [
                'internal const string SystemTextEncodingUTF7Message = '
                '"The UTF-7 encoding is insecure and should not be used.";',
                'internal const string SystemTextEncodingUTF7DiagId = "SYSLIB0001";',
                'internal const string NewObsoletionDiagId = "SYSLIB0060";',
            ]
        ),
    )

    result = Collector().collect([(get_repository("runtime"), tmp_path)])

    assert result.errors == []
    family = _by_prefix(result.families)["SYSLIB"]
    assert [record.id for record in family.records] == ["SYSLIB0001", "SYSLIB0060", "SYSLIB1001"]
    first = family.records[0]
    assert first.category == "Obsoletion"
    assert first.name == "SystemTextEncodingUTF7"
    assert first.message == "The UTF-7 encoding is insecure and should not be used."
    assert first.error_url == "https://aka.ms/dotnet-warnings/syslib0001"
    assert first.doc_url is not None and first.doc_url.endswith("/syslib0001.md")
    assert family.records[1].category == "Obsoletion"
    assert family.records[2].category == "Analyzer"


def test_col_002_always_emitted_family_survives_missing_artifacts(tmp_path: Path) -> None:
    result = Collector().collect([(get_repository("runtime"), tmp_path)])

    assert result.errors == []
    assert [family.prefix for family in result.families] == ["SYSLIB"]
    assert result.families[0].records == ()


def test_col_003_empty_family_is_omitted_when_not_always_emitted(tmp_path: Path) -> None:
    result = Collector().collect([(get_repository("sdk"), tmp_path)])

    assert result.families == []
    assert result.errors == []


def test_col_004_malformed_resource_is_reported_and_skipped(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Build/Resources/Strings.resx",
        _resx(
            ("BuildStarted", "MSB4001: The project could not be built."),
            ("TaskFailed", "MSB3021: Unable to copy file."),
            ("Plain", "No code here"),
        ),
    )
    write_file(tmp_path / "src/Tasks/Resources/Strings.resx", "<root><data name='broken'>")

    result = Collector().collect([(get_repository("msbuild"), tmp_path)])

    assert len(result.errors) == 1
    assert result.errors[0].file_path == "src/Tasks/Resources/Strings.resx"
    families = _by_prefix(result.families)
    assert set(families) == {"MSB"}
    records = families["MSB"].records
    assert [record.id for record in records] == ["MSB3021", "MSB4001"]
    assert records[0].category == "Task"
    assert records[1].category == "Engine"
    assert records[1].name == "BuildStarted"
    assert records[1].error_url == "https://learn.microsoft.com/visualstudio/msbuild/errors/msb4001"


def test_col_005_backfill_pass_adds_only_new_identifiers(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Shared/EFDiagnostics.cs",
        "\n".join(
            [
                "internal static class EFDiagnostics",
                "{",
                '    public const string InterpolatedStringUsageInRawQueries = "EF1001";',
                '    public const string ProviderExperimentalApi = "EF9001";',
                "}",
            ]
        ),
    )
    write_file(
        tmp_path / "src/EFCore.Analyzers/AnalyzerReleases.Shipped.md",
        "\n".join(
            [
                "Rule ID | Category | Severity | Notes",
                "--------|----------|----------|-------",
                "EF1001 | Usage | Warning | InterpolatedStringUsageInRawQueriesAnalyzer",
                "EF1002 | Usage | Warning | StringsUsageInRawQueriesAnalyzer",
            ]
        ),
    )

    result = Collector().collect([(get_repository("efcore"), tmp_path)])

    records = {record.id: record for record in _by_prefix(result.families)["EF"].records}
    assert list(records) == ["EF1001", "EF1002", "EF9001"]
    assert records["EF1001"].name == "InterpolatedStringUsageInRawQueries"
    assert records["EF1002"].name == "StringsUsageInRawQueriesAnalyzer"
    assert records["EF1002"].category == "Analyzer"
    assert records["EF9001"].category == "Experimental"


def test_col_006_roslyn_reads_enum_with_related_resources(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Compilers/CSharp/Portable/Errors/ErrorCode.cs",
        "internal enum ErrorCode\n{\n    ERR_BadBinaryOps = 19,\n    WRN_UnreferencedField = 169,\n}\n",
    )
    write_file(
        tmp_path / "src/Compilers/CSharp/Portable/CSharpResources.resx",
        _resx(("ERR_BadBinaryOps", "Operator '{0}' cannot be applied")),
    )

    result = Collector().collect([(get_repository("roslyn"), tmp_path)])

    records = _by_prefix(result.families)["CS"].records
    assert records[0] == DiagnosticRecord(
        id="CS0019",
        category="ERR",
        name="ERR_BadBinaryOps",
        message="Operator '{0}' cannot be applied",
        doc_url=(
            "https://raw.githubusercontent.com/dotnet/docs/main/docs/csharp/"
            "language-reference/compiler-messages/cs0019.md"
        ),
        error_url=(
            "https://learn.microsoft.com/dotnet/csharp/language-reference/compiler-messages/cs0019"
        ),
    )
    assert records[1].message is None


def test_col_007_extensions_split_one_file_into_families(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Shared/DiagnosticIds/DiagnosticIds.cs",
        "\n".join(
            [
                "internal static class DiagnosticIds",
                "{",
                "    internal static class LoggerMessage",
                "    {",
                "        internal const string LOGGEN000 = nameof(LOGGEN000);",
                "        internal const string LOGGEN001 = nameof(LOGGEN001);",
                "    }",
                "    internal static class Experiments",
                "    {",
                '        internal const string Resilience = "EXTEXP0001";',
                "    }",
                "}",
            ]
        ),
    )

    result = Collector().collect([(get_repository("extensions"), tmp_path)])

    families = _by_prefix(result.families)
    assert set(families) == {"LOGGEN", "EXTEXP"}
    assert [record.id for record in families["LOGGEN"].records] == ["LOGGEN000", "LOGGEN001"]
    experiment = families["EXTEXP"].records[0]
    assert experiment.name == "Resilience"
    assert experiment.category == "Experimental"
    assert experiment.error_url == "https://aka.ms/dotnet-extensions-warnings/EXTEXP0001"


def test_col_008_artifact_matcher_applies_include_and_exclude(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(tmp_path / "a/RazorDiagnosticFactory.cs", "")
    write_file(tmp_path / "a/b/ComponentDiagnostics.cs", "")
    write_file(tmp_path / "a/b/Other.cs", "")
    matcher = ArtifactMatcher.for_pass(
        ExtractionPass(
            label="scan",
            extractor=SourceScanExtractor(r"RZ\d{4}"),
            root=".",
            patterns=("*[Dd]iagnostic*.cs",),
            exclude=("RazorDiagnosticFactory.cs",),
        )
    )

    discovered = [path.relative_to(tmp_path).as_posix() for path in matcher.discover(tmp_path)]

    assert discovered == ["a/b/ComponentDiagnostics.cs"]


def test_col_009_collects_several_repositories_in_order(
    tmp_path: Path, write_file: WriteFile
) -> None:
    runtime_root = tmp_path / "runtime"
    sdk_root = tmp_path / "sdk"
    runtime_root.mkdir()
    write_file(
        sdk_root / "src/Tasks/Common/Resources/Strings.resx",
        _resx(("AssetsFileNotFound", "NETSDK1004: Assets file '{0}' not found.")),
    )

    result = Collector().collect(
        [(get_repository("runtime"), runtime_root), (get_repository("sdk"), sdk_root)]
    )

    assert [family.prefix for family in result.families] == ["SYSLIB", "NETSDK"]
    netsdk = result.families[1].records[0]
    assert netsdk.name == "AssetsFileNotFound"
    assert netsdk.category == "Build"
    assert netsdk.message == "Assets file '{0}' not found."


def test_col_010_configured_url_templates_take_precedence(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Tasks/Common/Resources/Strings.resx",
        _resx(("AssetsFileNotFound", "NETSDK1004: Assets file '{0}' not found.")),
    )
    write_file(
        tmp_path / "src/Microsoft.CodeAnalysis.NetAnalyzers/AnalyzerReleases.Shipped.md",
        "CA1000 | Design | Hidden | DoNotDeclareStaticMembersOnGenericTypes\n",
    )
    config = CollectorConfig.from_dict(
        {
            "repos": {
                "sdk": {
                    "prefixes": {
                        "netsdk": {
                            "helpUrl": "https://docs.example/sdk-errors/{id}",
                            "markdownUrl": "https://raw.example/sdk-errors/{id}.md",
                        },
                        "CA": {"indexUrl": "https://docs.example/quality-rules"},
                    }
                }
            }
        }
    )

    result = Collector(config=config).collect([(get_repository("sdk"), tmp_path)])

    families = _by_prefix(result.families)
    netsdk = families["NETSDK"].records[0]
    assert netsdk.error_url == "https://docs.example/sdk-errors/netsdk1004"
    assert netsdk.doc_url == "https://raw.example/sdk-errors/netsdk1004.md"
    ca = families["CA"].records[0]
    assert ca.doc_url is not None and ca.doc_url.endswith("/quality-rules/ca1000.md")
    assert ca.error_url == (
        "https://learn.microsoft.com/dotnet/fundamentals/code-analysis/quality-rules/ca1000"
    )


def test_col_011_index_url_fills_doc_url_when_no_template_exists(
    tmp_path: Path, write_file: WriteFile
) -> None:
    write_file(
        tmp_path / "src/Build/Resources/Strings.resx",
        _resx(("BuildStarted", "MSB4001: The project could not be built.")),
    )
    config = CollectorConfig.from_dict(
        {"repos": {"msbuild": {"prefixes": {"MSB": {"indexUrl": "https://docs.example/msb"}}}}}
    )

    result = Collector(config=config).collect([(get_repository("msbuild"), tmp_path)])

    record = _by_prefix(result.families)["MSB"].records[0]
    assert record.doc_url == "https://docs.example/msb"
    assert record.error_url == "https://learn.microsoft.com/visualstudio/msbuild/errors/msb4001"
