# cypred/config/io_config.py
from pydantic import BaseModel, Field


class ColumnConfig(BaseModel):
    identifier: str = "ID"
    feature_payload: str = "Canonical_Smiles"
    label: str = "Inhibition"


class IOConfig(BaseModel):
    """
    Delimited text contract (input + submission output)
    """

    delimiter: str = Field(default=",", min_length=1)
    columns: ColumnConfig = Field(default_factory=ColumnConfig)

    # submission
    submission_header: str = "ID,Inhibition"
    submission_decimals: int = 6
    submission_file: str = "submission.csv"
