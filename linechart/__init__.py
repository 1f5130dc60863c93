from linechart.chart import LineChart
from linechart.config import ChartConfig, load_config
from linechart.errors import ChartDataError
from linechart.interaction import Selection, SelectionDelegate
from linechart.layout import ChartLayout, compute_layout
from linechart.scales import LinearScale, TickRange, round_half_away_from_zero
from linechart.series import ChartData

__all__ = [
    "ChartConfig",
    "ChartData",
    "ChartDataError",
    "ChartLayout",
    "LineChart",
    "LinearScale",
    "Selection",
    "SelectionDelegate",
    "TickRange",
    "compute_layout",
    "load_config",
    "round_half_away_from_zero",
]
