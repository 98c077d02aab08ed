from pathlib import Path
import logging

import pandas as pd

from .models import TodoItem

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["id", "title", "percentage", "completed", "color"]


def items_to_frame(items: list[TodoItem]) -> pd.DataFrame:
    if not items:
        return pd.DataFrame(
            {
                "id": pd.Series(dtype="object"),
                "title": pd.Series(dtype="object"),
                "percentage": pd.Series(dtype="float64"),
                "completed": pd.Series(dtype="bool"),
                "color": pd.Series(dtype="object"),
            }
        )
    df = pd.DataFrame([item.to_dict() for item in items], columns=EXPORT_COLUMNS)
    df["percentage"] = df["percentage"].astype(float)
    df["completed"] = df["completed"].astype(bool)
    return df


def export_csv(items: list[TodoItem], path) -> Path:
    path = Path(path)
    df = items_to_frame(items)
    df.to_csv(path, index=False, encoding="utf-8")
    logger.info("Exported %d to-do items to %s", len(df), path)
    return path
