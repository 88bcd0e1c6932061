from gql import gql, make_schema
from gql.resolver import register_resolvers
from graphql import (
    FieldNode,
    FragmentSpreadNode,
    GraphQLError,
    GraphQLSchema,
    InlineFragmentNode,
    ValidationRule,
    get_named_type,
    specified_rules,
)

type_defs = gql(
    """
  type Planet {
    id: ID
    name: String
    diameter: String
    climate: String
    terrain: String
    residents: [Person]
  }

  type Person {
    id: ID
    name: String
    gender: String
    homeworld: Planet
  }

  type Query {
    planet(id: ID!): Planet
    allPlanets: [Planet]
    person(id: ID!): Person
    allPeople: [Person]
  }
"""
)

# Fields resolved by fetching related resources, per owning type.
RELATION_FIELDS = {
    'Planet': 'residents',
    'Person': 'homeworld',
}


def is_relation(type_name: str, field_name: str) -> bool:
    return RELATION_FIELDS.get(type_name) == field_name


class NestedRelationRule(ValidationRule):
    """Relations resolve one level deep: no relation may be selected inside another."""

    def enter_field(self, node: FieldNode, *_args):
        parent_type = self.context.get_parent_type()
        field_def = self.context.get_field_def()
        if not parent_type or not field_def or not is_relation(parent_type.name, node.name.value):
            return
        target_name = get_named_type(field_def.type).name
        for nested in self.collect_fields(node.selection_set, set()):
            if is_relation(target_name, nested.name.value):
                self.report_error(
                    GraphQLError(
                        f"Cannot select '{nested.name.value}' inside '{node.name.value}':"
                        " related resources resolve one level deep.",
                        nested,
                    )
                )

    def collect_fields(self, selection_set, visited):
        if not selection_set:
            return
        for selection in selection_set.selections:
            if isinstance(selection, FieldNode):
                yield selection
            elif isinstance(selection, InlineFragmentNode):
                yield from self.collect_fields(selection.selection_set, visited)
            elif isinstance(selection, FragmentSpreadNode):
                name = selection.name.value
                fragment = self.context.get_fragment(name)
                if fragment and name not in visited:
                    visited.add(name)
                    yield from self.collect_fields(fragment.selection_set, visited)


validation_rules = [*specified_rules, NestedRelationRule]


def make_swapi_schema() -> GraphQLSchema:
    # Resolvers register themselves on import.
    from . import resolvers  # noqa: F401

    schema = make_schema(type_defs)
    register_resolvers(schema)
    return schema
