from .data_frame_extractor import (
    DataFrameExtractor as DataFrameExtractor,
    series_to_pandas as series_to_pandas,
)
