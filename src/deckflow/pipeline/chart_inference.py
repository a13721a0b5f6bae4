"""
Chart inference: tabular data -> ChartSpec

Decision rules (first match wins):
1. Time series                          -> line
2. One numeric column, <= 8 rows        -> pie
3. Several numeric columns, <= 12 rows  -> bar
4. More than 20 rows                    -> area
5. Two numeric columns, |r| > 0.3       -> scatter
6. Otherwise                            -> bar

A column is numeric only when every row holds a finite number at that index;
tables without numeric columns produce no chart.
"""

from __future__ import annotations
import logging
import re
from dataclasses import replace
from typing import List, Optional

from ..core.config import Config
from ..core.types import (
    BlockType,
    ChartOptions,
    ChartSeries,
    ChartSpec,
    ChartType,
    ContentBlock,
    TableData,
)
from ..core.utils import parse_number, pearson_correlation

logger = logging.getLogger(__name__)

TIME_PATTERNS = [
    re.compile(r"\b(1[89]|20)\d{2}\b"),
    re.compile(
        r"\b(jan(uary)?|feb(ruary)?|mar(ch)?|apr(il)?|may|june?|july?|aug(ust)?"
        r"|sep(t(ember)?)?|oct(ober)?|nov(ember)?|dec(ember)?)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\bq[1-4]\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}/\d{1,2}(/\d{2,4})?\b"),
    re.compile(r"\b\d{4}-\d{2}(-\d{2})?\b"),
]

TIME_HEADER_RE = re.compile(r"^\s*(year|month|quarter|date|week|period)s?\s*$", re.IGNORECASE)

IDENTIFIER_HEADERS = {"id", "index", "#"}


def is_time_value(value) -> bool:
    s = str(value) if value is not None else ""
    return any(p.search(s) for p in TIME_PATTERNS)


def detect_numeric_columns(table: TableData) -> List[int]:
    """
    Indexes of columns whose every row parses to a finite number.

    Empty and missing cells are non-numeric.

    Examples:
        >>> detect_numeric_columns(TableData(["Name", "Score"], [["a", "1"], ["b", "2.5"]]))
        [1]
    """
    if not table.rows:
        return []
    numeric = []
    for col in range(table.column_count):
        if all(col < len(row) and parse_number(row[col]) is not None for row in table.rows):
            numeric.append(col)
    return numeric


def is_time_series(table: TableData, numeric_columns: List[int]) -> bool:
    """A category column header names a time unit, or every first-column value is a time value."""
    for i, header in enumerate(table.headers):
        if i not in numeric_columns and (is_time_value(header) or TIME_HEADER_RE.match(header or "")):
            return True
    if not table.rows:
        return False
    return all(len(row) > 0 and is_time_value(row[0]) for row in table.rows)


class ChartInference:
    """
    Choose a chart type for a table and extract its categories and series.

    Example:
        >>> spec = ChartInference(Config()).infer(TableData(["Month", "Sales"], rows))
        >>> spec.type
        <ChartType.LINE: 'line'>
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def infer(self, table: TableData) -> Optional[ChartSpec]:
        if table is None or not table.rows:
            return None

        numeric = detect_numeric_columns(table)
        if not numeric:
            logger.debug("No numeric columns, table stays a table")
            return None

        chart_type = self.chart_type(table, numeric)
        series = self._series(table, numeric)
        spec = ChartSpec(
            type=chart_type,
            title=self._title(table.headers),
            categories=self._categories(table, numeric),
            series=series,
            options=ChartOptions(
                show_legend=len(series) > 1,
                show_title=True,
                show_values=table.row_count <= self.config.show_values_max_rows,
                grid_lines=True,
                theme=self.config.chart_theme,
            ),
        )
        logger.debug(f"Inferred {chart_type.value} chart: {len(series)} series x {table.row_count} rows")
        return spec

    def chart_type(self, table: TableData, numeric: List[int]) -> ChartType:
        rows = table.row_count
        if is_time_series(table, numeric):
            return ChartType.LINE
        if len(numeric) == 1 and rows <= self.config.pie_max_rows:
            return ChartType.PIE
        if len(numeric) > 1 and rows <= self.config.comparison_max_rows:
            return ChartType.BAR
        if rows > self.config.dense_min_rows:
            return ChartType.AREA
        if len(numeric) == 2:
            x = [parse_number(r[numeric[0]]) for r in table.rows]
            y = [parse_number(r[numeric[1]]) for r in table.rows]
            if abs(pearson_correlation(x, y)) > self.config.correlation_threshold:
                return ChartType.SCATTER
        return ChartType.BAR

    def to_chart_block(self, block: ContentBlock) -> ContentBlock:
        """Convert a table block into a chart block; other blocks pass through."""
        if block.type != BlockType.TABLE:
            return block
        spec = self.infer(block.content)
        if spec is None:
            return block
        weight = self.config.block_weights.get(BlockType.CHART.value, block.visual_weight)
        return replace(block, type=BlockType.CHART, content=spec, visual_weight=weight)

    # ---------------------------
    # Extraction
    # ---------------------------
    def _series(self, table: TableData, numeric: List[int]) -> List[ChartSeries]:
        palette = self.config.chart_palette
        series = []
        for n, col in enumerate(numeric):
            header = table.headers[col] if col < len(table.headers) else ""
            values = []
            for row in table.rows:
                v = parse_number(row[col]) if col < len(row) else None
                values.append(v if v is not None else 0.0)
            series.append(ChartSeries(
                name=header or f"Series {n + 1}",
                values=values,
                color=palette[n % len(palette)],
            ))
        return series

    @staticmethod
    def _categories(table: TableData, numeric: List[int]) -> List[str]:
        category_col = next((i for i in range(table.column_count) if i not in numeric), None)
        if category_col is None:
            return [f"Item {i + 1}" for i in range(table.row_count)]
        return [
            str(row[category_col]) if category_col < len(row) else f"Item {i + 1}"
            for i, row in enumerate(table.rows)
        ]

    @staticmethod
    def _title(headers: List[str]) -> str:
        names = [h.strip() for h in headers if h and h.strip() and h.strip().lower() not in IDENTIFIER_HEADERS]
        return " vs ".join(names) if names else "Data Analysis"
