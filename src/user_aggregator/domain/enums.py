from enum import StrEnum

class CanonicalField(StrEnum):
    ID = "id"
    USERNAME = "username"
    NAME = "name"
    SURNAME = "surname"

class SourceStrategy(StrEnum):
    SQL = "sql"
    JDBC = "jdbc"

class AggregationMode(StrEnum):
    SEQUENTIAL = "sequential"
    CONCURRENT = "concurrent"
