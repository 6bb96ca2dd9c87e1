"""
Unit tests for the schema builder.
"""

import logging
import uuid
from typing import Any, List, Tuple

import pytest

from schema_forge.errors import SchemaDepthError, UnresolvableTypeError
from schema_forge.schema import SchemaBuilder, stable_reference_id
from schema_forge.schema.introspection import DEFAULT_UUID_DESCRIPTION
from schema_forge.schema.ledger import VisitationLedger
from schema_forge.schema.types import (
    ArrayNode,
    BooleanNode,
    EnumNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    ReferenceNode,
    StringNode,
)

from sample_types import (
    Address,
    Ambiguous,
    Category,
    Color,
    Dangling,
    Department,
    Employee,
    Event,
    Heterogeneous,
    HoldsAny,
    HoldsObject,
    Order,
    Person,
    TreeNode,
    Untyped,
    Wrapper,
)


@pytest.fixture
def builder():
    return SchemaBuilder()


class TestClassification:
    """Test primitive and collection classification."""

    def test_primitives(self, builder):
        """Test each primitive maps to its node kind."""
        assert builder.build(str) == StringNode()
        assert builder.build(int) == IntegerNode()
        assert builder.build(float) == NumberNode()
        assert builder.build(bool) == BooleanNode()

    def test_bool_is_not_integer(self, builder):
        """bool subclasses int but must classify as boolean."""
        assert isinstance(builder.build(bool), BooleanNode)

    def test_uuid_gets_default_description(self, builder):
        """Test UUID is a string with the fixed type-level description."""
        assert builder.build(uuid.UUID) == StringNode(description=DEFAULT_UUID_DESCRIPTION)

    def test_enum_values_in_declaration_order(self, builder):
        """Test enums use member names in declaration order."""
        node = builder.build(Color)

        assert isinstance(node, EnumNode)
        assert node.values == ("RED", "GREEN", "BLUE")

    def test_list_of_int(self, builder):
        """Test a sequence of integers builds an array node."""
        assert builder.build(List[int]) == ArrayNode(items=IntegerNode())
        assert builder.build(list[int]) == ArrayNode(items=IntegerNode())

    def test_mixed_in_enums_and_dates(self, builder):
        """Test str/int mixin enums stay enums and dates are strings."""
        node = builder.build(Event)

        assert node.properties["happened_at"] == StringNode()
        assert node.properties["on"] == StringNode()
        assert node.properties["labels"] == ArrayNode(items=StringNode())
        assert node.properties["samples"] == ArrayNode(items=IntegerNode())
        assert node.properties["priority"] == EnumNode(values=("LOW", "HIGH"))
        assert node.properties["mood"] == EnumNode(values=("HAPPY", "GRUMPY"))


class TestObjects:
    """Test object construction."""

    def test_wrapper_object(self, builder):
        """Test a two-field dataclass builds an object with all fields required."""
        node = builder.build(Wrapper)

        assert isinstance(node, ObjectNode)
        assert list(node.properties) == ["f1", "f2"]
        assert node.properties["f1"] == StringNode()
        assert node.properties["f2"] == IntegerNode()
        assert node.required == ("f1", "f2")
        assert node.definitions is None

    def test_descriptions(self, builder):
        """Test field and type level descriptions are picked up."""
        node = builder.build(Person)

        assert node.description == "A person known to the system"
        assert node.properties["id"].description == DEFAULT_UUID_DESCRIPTION
        assert node.properties["name"].description == "Full name of the person"
        assert node.properties["age"] == IntegerNode(description="Age in years")
        assert node.properties["nickname"] == StringNode()
        assert node.properties["favorite_color"] == EnumNode(values=("RED", "GREEN", "BLUE"))

    def test_optional_fields_are_still_required(self, builder):
        """Test every declared field is listed as required."""
        node = builder.build(Person)

        assert node.required == tuple(node.properties)
        assert "nickname" in node.required

    def test_shared_type_is_inlined(self, builder):
        """Test a non-recursive type used twice is inlined both times."""
        node = builder.build(Person)

        assert isinstance(node.properties["home"], ObjectNode)
        assert node.properties["home"] == node.properties["work"]
        assert node.properties["home"].properties["coordinates"] == ArrayNode(items=NumberNode())
        assert node.definitions is None

    def test_pydantic_model(self, builder):
        """Test pydantic models use model_fields, descriptions and aliases."""
        node = builder.build(Order)

        assert list(node.properties) == ["order_id", "items", "total", "isPaid"]
        assert node.properties["total"] == NumberNode()
        assert node.properties["isPaid"] == BooleanNode()

        line_item = node.properties["items"].items
        assert isinstance(line_item, ObjectNode)
        assert line_item.properties["sku"] == StringNode(description="Stock keeping unit")

    def test_explicit_description_overrides_type_description(self, builder):
        """Test an explicit description wins over the decorator."""
        node = builder.object_or_reference(Person, "Override", VisitationLedger())

        assert node.description == "Override"


class TestRecursion:
    """Test cycle detection and $defs emission."""

    def test_self_reference(self, builder):
        """Test a self-referential type terminates with one definition."""
        node = builder.build(TreeNode)
        ref_id = stable_reference_id(TreeNode)

        children = node.properties["children"]
        assert isinstance(children, ArrayNode)
        assert children.items == ReferenceNode(ref_id=ref_id)
        assert list(node.definitions) == [ref_id]

        definition = node.definitions[ref_id]
        assert isinstance(definition, ObjectNode)
        assert definition.definitions is None
        assert definition.properties == node.properties

    def test_mutual_recursion(self, builder):
        """Test A -> B -> A registers only the re-encountered type."""
        node = builder.build(Department)
        department_id = stable_reference_id(Department)

        manager = node.properties["manager"]
        assert isinstance(manager, ObjectNode)
        assert manager.properties["department"] == ReferenceNode(ref_id=department_id)
        assert list(node.definitions) == [department_id]

    def test_mutual_recursion_from_other_end(self, builder):
        """Test the root of the walk is the one registered in $defs."""
        node = builder.build(Employee)

        assert list(node.definitions) == [stable_reference_id(Employee)]

    def test_pydantic_self_reference(self, builder):
        """Test Optional self-references on pydantic models."""
        node = builder.build(Category)
        ref_id = stable_reference_id(Category)

        assert node.properties["parent"] == ReferenceNode(ref_id=ref_id)
        assert list(node.definitions) == [ref_id]

    def test_ledger_entries(self, builder):
        """Test the ledger holds one entry per custom type, finished nodes in slots."""
        ledger = VisitationLedger()
        builder.object_or_reference(Department, None, ledger, emit_definitions=True)

        assert len(ledger) == 2
        assert all(isinstance(ledger.node(entry), ObjectNode) for entry in ledger)
        assert [entry.ref_id for entry in ledger.recursive_entries()] == [stable_reference_id(Department)]

    def test_recursion_is_logged(self, builder, caplog):
        """Test recursion detection emits a debug record."""
        caplog.set_level(logging.DEBUG, logger="schema_forge.schema.builder")

        builder.build(TreeNode)

        assert any("Recursion detected" in record.message for record in caplog.records)

    def test_array_root_carries_definitions(self, builder):
        """Test a collection of a recursive type keeps its $defs at the root."""
        node = builder.build(List[TreeNode])
        ref_id = stable_reference_id(TreeNode)

        assert isinstance(node, ArrayNode)
        assert node.items.properties["children"].items == ReferenceNode(ref_id=ref_id)
        assert list(node.definitions) == [ref_id]
        assert node.definitions[ref_id] == node.items

    def test_tuple_root_carries_definitions(self, builder):
        node = builder.build(Tuple[TreeNode, ...])

        assert list(node.definitions) == [stable_reference_id(TreeNode)]

    def test_array_root_without_recursion(self, builder):
        """Test non-recursive array roots get no definitions."""
        assert builder.build(List[Wrapper]).definitions is None


class TestStableIds:
    """Test reference id derivation."""

    def test_ids_are_deterministic(self):
        """Test the same type always yields the same id."""
        assert stable_reference_id(TreeNode) == stable_reference_id(TreeNode)

    def test_ids_are_uuids(self):
        """Test ids are version 3 UUID strings."""
        assert uuid.UUID(stable_reference_id(TreeNode)).version == 3

    def test_ids_differ_between_types(self):
        """Test different types get different ids."""
        assert stable_reference_id(Department) != stable_reference_id(Employee)

    def test_builds_are_deterministic(self, builder):
        """Test repeated builds produce equal trees."""
        assert builder.build(Person) == builder.build(Person)
        assert builder.build(TreeNode) == SchemaBuilder().build(TreeNode)


class TestErrors:
    """Test builder failure modes."""

    def test_unparametrized_collection(self, builder):
        """Test a bare list raises instead of producing an untyped array."""
        with pytest.raises(UnresolvableTypeError, match="Untyped.items") as excinfo:
            builder.build(Untyped)

        assert excinfo.value.field_name == "items"
        assert excinfo.value.owner is Untyped

    def test_heterogeneous_tuple(self, builder):
        """Test a tuple of mixed element types is rejected."""
        with pytest.raises(UnresolvableTypeError, match="pair"):
            builder.build(Heterogeneous)

    def test_union(self, builder):
        """Test non-optional unions are rejected with the field named."""
        with pytest.raises(UnresolvableTypeError, match="Ambiguous.value"):
            builder.build(Ambiguous)

    def test_any_rejected(self, builder):
        """Test a field typed Any is rejected with the field named."""
        with pytest.raises(UnresolvableTypeError, match="HoldsAny.value"):
            builder.build(HoldsAny)

    def test_object_rejected(self, builder):
        with pytest.raises(UnresolvableTypeError, match="HoldsObject.value"):
            builder.build(HoldsObject)

    def test_any_root_rejected(self, builder):
        with pytest.raises(UnresolvableTypeError, match="Unconstrained"):
            builder.build(Any)

    def test_dangling_forward_reference(self, builder):
        """Test an unresolvable forward reference is reported."""
        with pytest.raises(UnresolvableTypeError, match="forward reference"):
            builder.build(Dangling)

    def test_depth_limit(self):
        """Test nesting beyond max_depth raises SchemaDepthError."""
        with pytest.raises(SchemaDepthError):
            SchemaBuilder(max_depth=2).build(List[List[List[int]]])

        assert SchemaBuilder(max_depth=3).build(List[List[List[int]]]) == ArrayNode(
            items=ArrayNode(items=ArrayNode(items=IntegerNode()))
        )

    def test_invalid_max_depth(self):
        """Test max_depth must be positive."""
        with pytest.raises(ValueError):
            SchemaBuilder(max_depth=0)

    def test_errors_are_value_errors(self, builder):
        """Test the error taxonomy derives from ValueError."""
        with pytest.raises(ValueError):
            builder.build(Untyped)

    def test_address_builds(self, builder):
        """Sanity check: homogeneous fixed-size tuples are fine."""
        node = builder.build(Address)

        assert node.properties["coordinates"] == ArrayNode(items=NumberNode())
