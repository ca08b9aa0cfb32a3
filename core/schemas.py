from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from core.coercion import to_float


class MediaAggregateModel(BaseModel):
    """Flat summary written by the CSV aggregator."""

    totalInvestment: float = 0.0
    totalImpressions: int = 0
    totalClicks: int = 0
    totalEngagement: int = 0
    mediaDistribution: Dict[str, Union[str, float]] = Field(default_factory=dict)


class MonthlyTrend(BaseModel):
    total: float = 0.0
    banks: Dict[str, float] = Field(default_factory=dict)


class BankSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    totalInvestment: float = 0.0


class DashboardPayload(BaseModel):
    monthlyTrends: Dict[str, MonthlyTrend] = Field(default_factory=dict)
    mediaCategories: Dict[str, float] = Field(default_factory=dict)
    bankData: Dict[str, BankSummary] = Field(default_factory=dict)
    totalInvestment: Optional[float] = None

    @classmethod
    def from_aggregate(cls, aggregate: Mapping[str, Any], bank_name: str) -> "DashboardPayload":
        """Adapt one aggregator summary into the dashboard shape.

        The flat summary has no month dimension, so ``monthlyTrends`` stays empty.
        """
        summary = MediaAggregateModel.model_validate(dict(aggregate))
        return cls(
            monthlyTrends={},
            mediaCategories={k: to_float(v) for k, v in summary.mediaDistribution.items()},
            bankData={bank_name: BankSummary(totalInvestment=summary.totalInvestment)},
            totalInvestment=summary.totalInvestment,
        )
