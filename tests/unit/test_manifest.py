"""Unit tests for manifest loading and validation."""

import pytest

from pause.contexts.templating.manifest import (
    DEFAULT_DELIMITERS,
    MANIFEST_FILES,
    TemplateManifest,
    TemplateType,
    find_manifest,
    load_manifest,
)
from pause.exceptions import (
    InvalidTemplateTypeError,
    ManifestNotFoundError,
    MissingFieldsError,
    PauseError,
    UnsupportedManifestFormatError,
)

VALID = {
    "name": "Classic",
    "type": "latex",
    "entrypoint": "resume.tex.tmpl",
    "output_name": "resume",
}


@pytest.mark.unit
def test_load_yaml_manifest_applies_default_delimiters(make_template):
    template_dir = make_template("classic", manifest=VALID)

    manifest = load_manifest(template_dir)

    assert manifest.name == "Classic"
    assert manifest.type is TemplateType.LATEX
    assert manifest.entrypoint == "resume.tex.tmpl"
    assert manifest.output_name == "resume"
    assert manifest.build_cmd is None
    assert manifest.delimiters == DEFAULT_DELIMITERS == ("[[", "]]")


@pytest.mark.unit
def test_load_json_manifest_with_optional_fields(make_template):
    template_dir = make_template(
        "custom",
        manifest={**VALID, "type": "html", "build_cmd": "make", "delimiters": ["<<", ">>"]},
        manifest_file="template.json",
    )

    manifest = load_manifest(template_dir)

    assert manifest.type is TemplateType.HTML
    assert manifest.build_cmd == "make"
    assert manifest.delimiters == ("<<", ">>")


@pytest.mark.unit
def test_yml_manifest(make_template):
    template_dir = make_template("yml", manifest=VALID, manifest_file="template.yml")
    assert load_manifest(template_dir).name == "Classic"


@pytest.mark.unit
def test_candidate_priority_yaml_before_yml_before_json(make_template):
    template_dir = make_template("multi", manifest={**VALID, "name": "from json"}, manifest_file="template.json")
    make_template("multi", manifest={**VALID, "name": "from yml"}, manifest_file="template.yml")
    assert load_manifest(template_dir).name == "from yml"

    make_template("multi", manifest={**VALID, "name": "from yaml"}, manifest_file="template.yaml")
    assert load_manifest(template_dir).name == "from yaml"
    assert find_manifest(template_dir).name == "template.yaml"


@pytest.mark.unit
def test_no_manifest(make_template):
    template_dir = make_template("empty", files={"readme.md": "hi"})

    with pytest.raises(ManifestNotFoundError) as exc_info:
        load_manifest(template_dir)

    for candidate in MANIFEST_FILES:
        assert candidate in str(exc_info.value)
    assert exc_info.value.kind == "ManifestNotFound"


@pytest.mark.unit
def test_toml_only_manifest_is_unsupported(make_template):
    template_dir = make_template("toml", files={"template.toml": 'name = "x"\n'})

    with pytest.raises(UnsupportedManifestFormatError) as exc_info:
        load_manifest(template_dir)

    assert "template.toml" in str(exc_info.value)
    assert exc_info.value.kind == "UnsupportedFormat"


@pytest.mark.unit
def test_missing_type_is_named(make_template):
    manifest = {k: v for k, v in VALID.items() if k != "type"}
    template_dir = make_template("notype", manifest=manifest)

    with pytest.raises(MissingFieldsError) as exc_info:
        load_manifest(template_dir)

    assert exc_info.value.missing_fields == ["type"]
    assert "type" in str(exc_info.value)


@pytest.mark.unit
def test_all_missing_fields_reported_at_once(make_template):
    template_dir = make_template("sparse", manifest={"name": "Only a name"})

    with pytest.raises(MissingFieldsError) as exc_info:
        load_manifest(template_dir)

    assert exc_info.value.missing_fields == ["type", "entrypoint", "output_name"]


@pytest.mark.unit
def test_invalid_type_names_value_and_valid_set(make_template):
    template_dir = make_template("docx", manifest={**VALID, "type": "docx"})

    with pytest.raises(InvalidTemplateTypeError) as exc_info:
        load_manifest(template_dir)

    message = str(exc_info.value)
    assert "docx" in message
    for valid in ("latex", "typst", "html", "markdown"):
        assert valid in message
    assert exc_info.value.kind == "InvalidType"


@pytest.mark.unit
def test_malformed_file_is_a_hard_failure(make_template):
    template_dir = make_template("broken", files={"template.json": "{not json"})

    with pytest.raises(PauseError):
        load_manifest(template_dir)


@pytest.mark.unit
@pytest.mark.parametrize("delimiters", [["{{"], "<>", 42, ["<<", ""], ["<<", 5]])
def test_bad_delimiters_rejected(delimiters):
    with pytest.raises(PauseError, match="delimiters"):
        TemplateManifest.from_dict({**VALID, "delimiters": delimiters})


@pytest.mark.unit
def test_shell_variables_in_yaml_stay_literal(make_template):
    template_dir = make_template("shell", files={"r.tex": "x"})
    (template_dir / "template.yaml").write_text(
        "name: Shell\n"
        "type: latex\n"
        "entrypoint: r.tex\n"
        "output_name: resume\n"
        "build_cmd: latexmk -pdf -jobname=${NAME} -outdir=${OUT_DIR:-.} r.tex\n"
    )

    manifest = load_manifest(template_dir)

    assert manifest.build_cmd == "latexmk -pdf -jobname=${NAME} -outdir=${OUT_DIR:-.} r.tex"


@pytest.mark.unit
def test_template_type_values():
    assert TemplateType.values() == ["latex", "typst", "html", "markdown"]
