# apps/reportanalyticsapp/utils/aggregation_utils.py

import math

import numpy as np
import pandas as pd

# pandas Period aliases used for trend buckets
BUCKETS = {"weekly": "W", "monthly": "M", "quarterly": "Q"}


def round2(value):
    """Round to 2 decimals, mapping None and NaN to None."""
    if value is None:
        return None
    value = float(value)
    if math.isnan(value):
        return None
    return round(value, 2)


class AggregationUtils:
    """
    Utility class for time series aggregation used by the analytics reports.
    """

    @staticmethod
    def fill_time_series_gaps(data, start_date, end_date, fill_value=0):
        """
        Fill gaps in time series data with a default value.

        Args:
            data: Dictionary with dates (or ISO date strings) as keys
            start_date: Start date for the time series
            end_date: End date for the time series
            fill_value: Value to use for filling gaps; None leaves gaps as null

        Returns:
            dict: Complete daily time series keyed by ``YYYY-MM-DD``
        """
        date_range = pd.date_range(start=pd.Timestamp(start_date).normalize(), end=pd.Timestamp(end_date).normalize())
        series = pd.Series(np.nan if fill_value is None else fill_value, index=date_range, dtype="float64")

        if data:
            input_series = pd.Series({pd.Timestamp(k): float(v) for k, v in data.items() if v is not None})
            input_series = input_series[input_series.index.isin(date_range)]
            series.update(input_series)

        return {date.strftime("%Y-%m-%d"): round2(value) for date, value in series.items()}

    @staticmethod
    def bucket_means(records, freq):
        """
        Average values per calendar bucket.

        Args:
            records: iterable of (date, value) pairs
            freq: pandas Period alias ("W", "M" or "Q")

        Returns:
            list of {"period", "average", "count"} in chronological order
        """
        records = [(pd.Timestamp(day), float(value)) for day, value in records if value is not None]
        if not records:
            return []

        frame = pd.DataFrame(records, columns=["date", "value"])
        grouped = frame.groupby(frame["date"].dt.to_period(freq))["value"].agg(["mean", "count"])
        return [
            {"period": str(period), "average": round2(row["mean"]), "count": int(row["count"])}
            for period, row in grouped.sort_index().iterrows()
        ]

    @staticmethod
    def mean(values):
        values = [float(v) for v in values if v is not None]
        if not values:
            return None
        return round2(np.mean(values))
