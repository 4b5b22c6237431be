"""Tests for yamldocgen.resolver.resolver."""

from __future__ import annotations

import pytest

from yamldocgen.config import TagConfig
from yamldocgen.errors import TypeNotFoundError
from yamldocgen.golang.signature import Array, Map, Named, Pointer, Qualified
from yamldocgen.models import Example
from yamldocgen.resolver.classifier import FieldClassifier
from yamldocgen.resolver.resolver import ResolutionContext, TypeGraphResolver, discover
from tests._fixtures.declarations import link, make_module, raw_field


def _job_module():
    return make_module(
        "example.com/app",
        {
            "Job": [
                raw_field("Name", Named("string")),
                raw_field(
                    "InternalOptions",
                    Pointer(Named("InternalOptions")),
                    tag='yaml:"internal-options" json:"internal-options"',
                ),
            ],
            "InternalOptions": [
                raw_field("BulkSize", Named("int"), tag='yaml:"bulk-size"'),
            ],
        },
    )


def test_discover_returns_root_first_with_type_references() -> None:
    resolved = TypeGraphResolver().discover([_job_module()], "Job")

    assert resolved.names() == ["Job", "InternalOptions"]
    assert resolved.root.name == "Job"
    assert resolved.root.is_root is True
    job = resolved.get("Job")
    assert [field.name for field in job.fields] == ["name", "internal-options"]
    assert job.fields[0].type_ref == ""
    assert job.fields[1].type_ref == "InternalOptions"
    assert job.fields[1].type == "InternalOptions"
    assert resolved.get("InternalOptions").is_root is False


def test_discover_matches_root_name_case_insensitively() -> None:
    resolved = TypeGraphResolver().discover([_job_module()], "job")
    assert resolved.root.name == "Job"


def test_discover_raises_when_root_missing() -> None:
    with pytest.raises(TypeNotFoundError):
        TypeGraphResolver().discover([_job_module()], "Missing")


def test_discover_raises_when_root_is_not_a_struct() -> None:
    module = make_module("example.com/app", {"Severity": None})
    with pytest.raises(TypeNotFoundError):
        TypeGraphResolver().discover([module], "Severity")


def test_shared_type_is_resolved_once() -> None:
    module = make_module(
        "example.com/app",
        {
            "Root": [
                raw_field("First", Named("Shared")),
                raw_field("Second", Array(Pointer(Named("Shared")))),
            ],
            "Shared": [raw_field("Value", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Root")

    assert resolved.names() == ["Root", "Shared"]
    root = resolved.get("Root")
    assert [field.type_ref for field in root.fields] == ["Shared", "Shared"]
    assert root.fields[1].type == "[]Shared"


def test_cyclic_references_terminate_with_one_decl_each() -> None:
    module = make_module(
        "example.com/app",
        {
            "A": [raw_field("B", Pointer(Named("B")))],
            "B": [raw_field("A", Array(Named("A")))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "A")

    assert resolved.names() == ["A", "B"]
    assert resolved.get("B").fields[0].type_ref == "A"


def test_self_referential_pointer_is_guarded() -> None:
    module = make_module(
        "example.com/app",
        {"Node": [raw_field("Children", Array(Pointer(Named("Node")))), raw_field("Next", Pointer(Named("Node")))]},
    )

    resolved = TypeGraphResolver().discover([module], "Node")

    assert resolved.names() == ["Node"]
    assert [field.type_ref for field in resolved.get("Node").fields] == ["Node", "Node"]


def test_map_values_are_followed_but_keys_are_not() -> None:
    module = make_module(
        "example.com/app",
        {
            "Root": [raw_field("Entries", Map(Named("Key"), Pointer(Named("Value"))))],
            "Key": [raw_field("ID", Named("string"))],
            "Value": [raw_field("Data", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Root")

    assert resolved.names() == ["Root", "Value"]
    entries = resolved.get("Root").fields[0]
    assert entries.type == "map[Key]Value"
    assert entries.type_ref == "Value"


def test_primitive_containers_do_not_reference_types() -> None:
    module = make_module(
        "example.com/app",
        {"Root": [raw_field("Providers", Map(Named("string"), Map(Named("string"), Named("string"))))]},
    )

    resolved = TypeGraphResolver().discover([module], "Root")

    field = resolved.get("Root").fields[0]
    assert field.type == "map[string]map[string]string"
    assert field.type_ref == ""


def test_embedded_fields_are_spliced_in_order_and_documented_standalone() -> None:
    module = make_module(
        "example.com/app",
        {
            "Parent": [
                raw_field("Before", Named("string")),
                raw_field(None, Named("Base"), tag='yaml:",inline"', comment="Base options."),
                raw_field("After", Named("int")),
            ],
            "Base": [
                raw_field("Alpha", Named("string")),
                raw_field("Beta", Named("bool")),
            ],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Parent")

    assert resolved.names() == ["Parent", "Base"]
    assert [field.name for field in resolved.get("Parent").fields] == ["before", "alpha", "beta", "after"]
    assert [field.name for field in resolved.get("Base").fields] == ["alpha", "beta"]


def test_embedded_type_already_discovered_is_reused() -> None:
    module = make_module(
        "example.com/app",
        {
            "Parent": [
                raw_field("Common", Pointer(Named("Base"))),
                raw_field(None, Pointer(Named("Base")), tag='yaml:",inline"', comment="Base options."),
            ],
            "Base": [raw_field("Alpha", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Parent")

    assert resolved.names() == ["Parent", "Base"]
    assert [field.name for field in resolved.get("Parent").fields] == ["common", "alpha"]


def test_cross_module_reference_uses_import_prefix() -> None:
    options = make_module(
        "example.com/app/options",
        {
            "Options": [raw_field("Inner", Pointer(Named("Inner")))],
            "Inner": [raw_field("Depth", Named("int"))],
        },
    )
    root = link(
        make_module(
            "example.com/app",
            {"Config": [raw_field("Options", Qualified("options", "Options"))]},
            imports={"options": "example.com/app/options"},
        ),
        options,
    )

    resolved = TypeGraphResolver().discover([root], "Config")

    assert resolved.names() == ["Config", "options.Options", "options.Inner"]
    config_field = resolved.get("Config").fields[0]
    assert config_field.type == "options.Options"
    assert config_field.type_ref == "options.Options"
    inner_field = resolved.get("options.Options").fields[0]
    assert inner_field.type == "options.Inner"
    assert inner_field.type_ref == "options.Inner"
    assert resolved.get("options.Inner").escaped_name == "OPTIONSInner"


def test_unresolvable_import_degrades_to_signature_only() -> None:
    module = make_module(
        "example.com/app",
        {"Config": [raw_field("Timeout", Qualified("time", "Duration")), raw_field("Other", Qualified("missing", "Thing"))]},
        imports={"time": "time"},
    )

    resolved = TypeGraphResolver().discover([module], "Config")

    fields = resolved.get("Config").fields
    assert [field.type for field in fields] == ["time.Duration", "missing.Thing"]
    assert [field.type_ref for field in fields] == ["", ""]


def test_reference_back_to_root_package_reuses_root_entry() -> None:
    root = make_module(
        "example.com/app",
        {"Job": [raw_field("Step", Qualified("steps", "Step"))]},
        imports={"steps": "example.com/app/steps"},
    )
    steps = make_module(
        "example.com/app/steps",
        {"Step": [raw_field("Parent", Pointer(Qualified("app", "Job")))]},
        imports={"app": "example.com/app"},
    )
    link(root, steps)
    link(steps, root)

    resolved = TypeGraphResolver().discover([root], "Job")

    assert resolved.names() == ["Job", "steps.Step"]
    assert resolved.get("steps.Step").fields[0].type_ref == "Job"


def test_first_case_insensitive_match_wins() -> None:
    module = make_module(
        "example.com/app",
        {
            "Config": [raw_field("First", Named("string"))],
            "CONFIG": [raw_field("Second", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "config")

    assert resolved.names() == ["Config"]


def test_earlier_case_variant_wins_over_exact_name() -> None:
    module = make_module(
        "example.com/app",
        {
            "CONFIG": [raw_field("First", Named("string"))],
            "Config": [raw_field("Second", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Config")

    assert resolved.root.name == "CONFIG"
    assert [field.name for field in resolved.root.fields] == ["first"]


def test_unexported_and_non_struct_candidates_are_passed_over() -> None:
    module = make_module(
        "example.com/app",
        {
            "options": [raw_field("Hidden", Named("string"))],
            "OPTIONS": None,
            "Options": [raw_field("Visible", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "options")

    assert resolved.names() == ["Options"]
    assert [field.name for field in resolved.root.fields] == ["visible"]


def test_part_definitions_are_attached_to_their_type() -> None:
    module = make_module(
        "example.com/app",
        {"Request": [raw_field("Method", Named("string"))]},
        part_definitions={"Request": [Example(name="body", value="HTTP request body")]},
    )

    resolved = TypeGraphResolver().discover([module], "Request")

    assert resolved.root.part_definitions == (Example(name="body", value="HTTP request body"),)


def test_discover_scopes_state_per_call() -> None:
    resolver = TypeGraphResolver()
    first = resolver.discover([_job_module()], "Job")
    second = resolver.discover([_job_module()], "Job")
    assert first.names() == second.names() == ["Job", "InternalOptions"]


def test_resolve_shares_a_context_between_calls() -> None:
    module = _job_module()
    resolver = TypeGraphResolver()
    context = ResolutionContext()

    options = resolver.resolve(context, module, "InternalOptions", "")
    job = resolver.resolve(context, module, "Job", "")

    assert options is not None and job is not None
    assert [decl.name for decl in context.decls()] == ["InternalOptions", "Job"]
    assert job.fields[1].type_ref == "InternalOptions"
    assert len(context) == 2


def test_module_level_discover_uses_given_resolver() -> None:
    resolver = TypeGraphResolver(classifier=FieldClassifier(tags=TagConfig(serialization="json")))
    resolved = discover([_job_module()], "Job", resolver=resolver)

    assert [field.name for field in resolved.root.fields] == ["internal-options"]
    assert discover([_job_module()], "Job").names() == ["Job", "InternalOptions"]


def test_undocumented_embedded_pointer_is_still_spliced() -> None:
    module = make_module(
        "example.com/app",
        {
            "Parent": [
                raw_field("Own", Named("string")),
                raw_field(None, Pointer(Named("Base")), tag='yaml:",inline"', comment=""),
            ],
            "Base": [raw_field("Shared", Named("string"))],
        },
    )

    resolved = TypeGraphResolver().discover([module], "Parent")

    assert resolved.names() == ["Parent", "Base"]
    assert [field.name for field in resolved.root.fields] == ["own", "shared"]
