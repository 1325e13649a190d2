"""Tests for ModelFile and ModelManager validation."""

from pathlib import Path

import pytest

from maestro.core.errors import ModelValidationError
from maestro.core.models import SYSTEM_NAMESPACE, ModelFile, ModelManager
from maestro.templating import ASSETS_DIR

SYSTEM_MODEL = (ASSETS_DIR / "models" / f"{SYSTEM_NAMESPACE}.cto").read_text()


def manager_with(*models: str, system: bool = True) -> ModelManager:
    manager = ModelManager()
    if system:
        manager.add_model_file(SYSTEM_MODEL, f"{SYSTEM_NAMESPACE}.cto", disable_validation=True, system=True)
    for i, text in enumerate(models):
        manager.add_model_file(text, f"models/m{i}.cto", disable_validation=True)
    return manager


class TestModelFile:
    """Lazy parsing and naming."""

    def test_name_is_path_below_models_directory(self) -> None:
        assert ModelFile("namespace org.acme", "models/sub/org.acme.cto").name == "sub/org.acme.cto"
        assert ModelFile("namespace org.acme", "models/org.acme.cto").name == "org.acme.cto"
        assert ModelFile("namespace org.acme", "other/org.acme.cto").name == "other/org.acme.cto"

    def test_same_base_name_in_different_directories(self) -> None:
        first = ModelFile("namespace org.a", "models/a/model.cto")
        second = ModelFile("namespace org.b", "models/b/model.cto")
        assert first.name != second.name

    def test_default_file_name_from_namespace(self) -> None:
        assert ModelFile("namespace org.acme").file_name == "org.acme.cto"

    def test_namespace_without_full_parse(self) -> None:
        model_file = ModelFile("namespace org.acme\nnot valid", "m.cto")
        assert model_file.namespace == "org.acme"
        with pytest.raises(ModelValidationError):
            model_file.spec  # noqa: B018

    def test_system_by_namespace_or_flag(self) -> None:
        assert ModelFile(SYSTEM_MODEL).is_system_model_file
        assert ModelFile("namespace org.acme", system=True).is_system_model_file
        assert not ModelFile("namespace org.acme").is_system_model_file


class TestModelManager:
    """Collection behaviour."""

    def test_insertion_order(self) -> None:
        manager = manager_with("namespace b.ns", "namespace a.ns", system=False)
        assert manager.get_namespaces() == ["b.ns", "a.ns"]

    def test_eager_validation_rejects_duplicate_namespace(self) -> None:
        manager = ModelManager()
        manager.add_model_file("namespace org.acme", "one.cto")
        with pytest.raises(ModelValidationError, match="already declared in one.cto"):
            manager.add_model_file("namespace org.acme", "two.cto")

    def test_eager_validation_rejects_syntax_errors(self) -> None:
        with pytest.raises(ModelValidationError):
            ModelManager().add_model_file("namespace org.acme\nwidget W {}", "m.cto")

    def test_disabled_validation_accepts_anything(self) -> None:
        manager = ModelManager()
        manager.add_model_file("namespace org.acme", "one.cto", disable_validation=True)
        manager.add_model_file("namespace org.acme", "two.cto", disable_validation=True)
        assert len(manager) == 2

    def test_get_system_model_files(self) -> None:
        manager = manager_with("namespace org.acme")
        assert [mf.namespace for mf in manager.get_system_model_files()] == [SYSTEM_NAMESPACE]


class TestValidation:
    """validate_model_files across files."""

    def test_vehicle_model_is_valid(self, acme_model: str) -> None:
        manager_with(acme_model).validate_model_files()

    def test_system_model_alone_is_valid(self) -> None:
        manager_with().validate_model_files()

    def test_duplicate_namespace(self, acme_model: str) -> None:
        manager = manager_with(acme_model, acme_model)
        with pytest.raises(ModelValidationError, match="Duplicate namespace org.acme") as exc_info:
            manager.validate_model_files()
        assert exc_info.value.context.file == Path("models/m1.cto")

    def test_undeclared_type(self) -> None:
        manager = manager_with(
            "namespace org.acme\nasset Car identified by vin {\n  o String vin\n  o Engine engine\n}\n"
        )
        with pytest.raises(ModelValidationError, match="Undeclared type Engine") as exc_info:
            manager.validate_model_files()
        assert exc_info.value.context.line == 4

    def test_import_of_unknown_namespace(self) -> None:
        manager = manager_with("namespace org.acme\nimport org.other.Thing\n")
        with pytest.raises(ModelValidationError, match="unknown namespace org.other"):
            manager.validate_model_files()

    def test_import_of_unknown_type(self) -> None:
        manager = manager_with("namespace org.other\n", "namespace org.acme\nimport org.other.Thing\n")
        with pytest.raises(ModelValidationError, match="unknown type Thing"):
            manager.validate_model_files()

    def test_named_and_wildcard_imports_resolve(self) -> None:
        manager_with(
            "namespace org.base\nconcept Address {\n  o String street\n}\n"
            "participant Owner identified by id {\n  o String id\n}\n",
            "namespace org.acme\nimport org.base.Address\nimport org.base.*\n"
            "asset House identified by id {\n  o String id\n  o Address address\n  --> Owner owner\n}\n",
        ).validate_model_files()

    def test_identifying_field_missing(self) -> None:
        manager = manager_with("namespace org.acme\nasset Car identified by vin {\n  o String id\n}\n")
        with pytest.raises(ModelValidationError, match="Identifying field vin is not declared"):
            manager.validate_model_files()

    def test_identifying_field_must_be_string(self) -> None:
        manager = manager_with("namespace org.acme\nasset Car identified by vin {\n  o Integer vin\n}\n")
        with pytest.raises(ModelValidationError, match="must be a String"):
            manager.validate_model_files()

    def test_identifier_inherited_from_abstract_parent(self) -> None:
        manager_with(
            "namespace org.acme\n"
            "abstract asset Base identified by id {\n  o String id\n}\n"
            "asset Car extends Base {\n  o Integer wheels\n}\n"
        ).validate_model_files()

    def test_concrete_asset_needs_identifier(self) -> None:
        manager = manager_with("namespace org.acme\nasset Car {\n  o String vin\n}\n")
        with pytest.raises(ModelValidationError, match="Asset Car must be identified"):
            manager.validate_model_files()

    def test_relationship_to_concept(self) -> None:
        manager = manager_with(
            "namespace org.acme\nconcept Address {\n  o String street\n}\n"
            "asset House identified by id {\n  o String id\n  --> Address address\n}\n"
        )
        with pytest.raises(ModelValidationError, match="must point to an identified type"):
            manager.validate_model_files()

    def test_extends_other_kind(self) -> None:
        manager = manager_with(
            "namespace org.acme\nconcept Address {\n  o String street\n}\n"
            "asset House extends Address {\n  o String id\n}\n"
        )
        with pytest.raises(ModelValidationError, match="cannot extend concept Address"):
            manager.validate_model_files()

    def test_property_shadows_inherited(self) -> None:
        manager = manager_with(
            "namespace org.acme\n"
            "abstract asset Base identified by id {\n  o String id\n}\n"
            "asset Car extends Base {\n  o String id\n}\n"
        )
        with pytest.raises(ModelValidationError, match="declared more than once in Car"):
            manager.validate_model_files()

    def test_duplicate_declaration(self) -> None:
        manager = manager_with("namespace org.acme\nconcept A {\n}\nconcept A {\n}\n")
        with pytest.raises(ModelValidationError, match="Duplicate declaration A"):
            manager.validate_model_files()

    def test_duplicate_enum_value(self) -> None:
        manager = manager_with("namespace org.acme\nenum E {\n  o X\n  o X\n}\n")
        with pytest.raises(ModelValidationError, match="more than once"):
            manager.validate_model_files()

    def test_circular_inheritance(self) -> None:
        manager = manager_with(
            "namespace org.acme\n"
            "abstract concept A extends B {\n}\n"
            "abstract concept B extends A {\n}\n"
        )
        with pytest.raises(ModelValidationError, match="Circular inheritance"):
            manager.validate_model_files()


class TestTypeResolution:
    """Super types and lookup."""

    def test_implicit_system_super_type(self, acme_model: str) -> None:
        manager = manager_with(acme_model)
        model_file = manager.get_model_file("org.acme")
        vehicle = model_file.get_declaration("Vehicle")
        colour = model_file.get_declaration("Colour")

        assert manager.get_super_type_name(model_file, vehicle) == f"{SYSTEM_NAMESPACE}.Asset"
        assert manager.get_super_type_name(model_file, colour) is None

    def test_no_implicit_super_type_without_system_model(self, acme_model: str) -> None:
        manager = manager_with(acme_model, system=False)
        model_file = manager.get_model_file("org.acme")
        assert manager.get_super_type_name(model_file, model_file.get_declaration("Vehicle")) is None

    def test_transaction_inherits_system_identifier(self, acme_model: str) -> None:
        manager = manager_with(acme_model)
        model_file = manager.get_model_file("org.acme")
        chain = manager.get_type_hierarchy(model_file, model_file.get_declaration("Transfer"))
        assert [decl.name for _, decl in chain] == ["Transfer", "Transaction"]

    def test_fully_qualified_lookup(self, acme_model: str) -> None:
        manager = manager_with(acme_model)
        model_file = manager.get_model_file("org.acme")
        target_file, target = manager.resolve_type(model_file, f"{SYSTEM_NAMESPACE}.Participant")
        assert target_file.namespace == SYSTEM_NAMESPACE
        assert target.abstract
