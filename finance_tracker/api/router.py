from strawberry.fastapi import GraphQLRouter

from finance_tracker.api.context import get_context
from finance_tracker.api.schema import schema


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)
