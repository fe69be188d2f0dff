from src.user_aggregator.domain.value_objects import FieldMapping, Filters, Query

def build_user_query(table: str, mapping: FieldMapping, filters: Filters | None) -> Query:
    """
    Собирает SELECT по таблице источника с условиями равенства.

    table и имена колонок берутся из конфигурации и вставляются в текст как есть,
    значения фильтров идут только в параметры. Ключи без маппинга пропускаются.
    """
    sql = f"SELECT * FROM {table}"
    conditions: list[str] = []
    params: list[str] = []

    for key, value in (filters or {}).items():
        column = mapping.column_for(key)
        if column is None:
            continue
        conditions.append(f"{column} = :p{len(params)}")
        params.append(value)

    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    return Query(sql=sql, params=tuple(params))
