from fastapi import Depends
from sqlalchemy.orm import Session

from db.session import get_db
from services.aggregates import AggregateProvider, SqlAggregateProvider


def get_aggregate_provider(db: Session = Depends(get_db)) -> AggregateProvider:
    return SqlAggregateProvider(db)


__all__ = ["get_db", "get_aggregate_provider"]
