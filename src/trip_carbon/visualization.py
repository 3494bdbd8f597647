import matplotlib.pyplot as plt
import os
from datetime import datetime
from typing import List, Optional
import logging

from .constants import BASELINE_MODE, TransportMode, TRANSPORT_MODE_INFO
from .models import ModeComparisonEntry

logger = logging.getLogger(__name__)

# ============================================================================
# VISUALIZER CLASS
# ============================================================================

# <project root>/reports
current_directory = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
report_directory = os.path.join(current_directory, 'reports')

# Bar colour by share of the largest emission
BAR_COLORS = [
    (25.0, '#27ae60'),   # green
    (75.0, '#f1c40f'),   # yellow
    (100.0, '#e67e22'),  # orange
]
BAR_COLOR_OVER = '#e74c3c'


def bar_color(share_percent: float) -> str:
    for limit, color in BAR_COLORS:
        if share_percent <= limit:
            return color
    return BAR_COLOR_OVER


class Visualizer:
    def __init__(self, output_root: Optional[str] = None):
        """
        Charts are written to <output_root>/<timestamp>/.
        output_root defaults to the project's reports/ folder.
        """
        self.output_root = output_root or report_directory
        self._setup_style()
        self.session_dir = self._create_session_dir()

    def _setup_style(self):
        """Clean, presentation-quality matplotlib defaults."""
        plt.rcParams.update(plt.rcParamsDefault)
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['Arial', 'Helvetica', 'Calibri', 'DejaVu Sans'],
            'font.size': 12,
            'axes.titlesize': 16,
            'axes.titleweight': 'bold',
            'axes.labelsize': 13,
            'text.color': '#2C3E50',
            'axes.labelcolor': '#2C3E50',
            'xtick.color': '#2C3E50',
            'ytick.color': '#2C3E50',
            'axes.spines.top': False,
            'axes.spines.right': False,
            'axes.grid': True,
            'axes.grid.axis': 'y',
            'grid.color': '#E0E0E0',
            'grid.linestyle': ':',
            'axes.axisbelow': True,
        })
        self.colors = {
            'text': '#2C3E50',
        }

    def _create_session_dir(self) -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.output_root, timestamp)
        os.makedirs(path, exist_ok=True)
        return path

    def get_save_path(self, filename: str) -> str:
        return os.path.join(self.session_dir, filename)

    def plot_mode_comparison(
        self,
        entries: List[ModeComparisonEntry],
        selected: Optional[TransportMode] = None,
        baseline: TransportMode = BASELINE_MODE,
        title: str = "",
    ) -> Optional[str]:
        """
        Bar chart of emissions per transport mode, each bar tagged with its share
        of the baseline emission. The selected mode is outlined in its own colour.
        Returns the PNG path.
        """
        if not entries:
            return None

        labels = [TRANSPORT_MODE_INFO[e.mode].label for e in entries]
        base_label = TRANSPORT_MODE_INFO[baseline].label
        values = [e.emission for e in entries]
        top = max(values)
        colors = [bar_color(v / top * 100 if top > 0 else 0.0) for v in values]

        fig, ax = plt.subplots(figsize=(10, 6), dpi=150)
        bars = ax.bar(labels, values, color=colors, alpha=0.9, width=0.6, edgecolor='none')

        for bar, entry in zip(bars, entries):
            if entry.mode == selected:
                bar.set_edgecolor(TRANSPORT_MODE_INFO[entry.mode].color)
                bar.set_linewidth(2.5)
            height = bar.get_height()
            tag = f"{height:.2f} kg"
            if entry.percentage_defined:
                tag += f"\n{entry.percentage_vs_car:.1f}% vs {base_label}"
            ax.text(bar.get_x() + bar.get_width() / 2., height + (top * 0.01),
                    tag, ha='center', va='bottom', fontsize=10, fontweight='bold',
                    color=self.colors['text'])

        ax.set_ylabel("Emissions (kgCO2)", fontweight='bold')
        ax.set_title(f"Emissions by Transport Mode\n{title}", pad=20, loc='left')
        if top > 0:
            ax.set_ylim(0, top * 1.2)
        plt.tight_layout()

        filepath = self.get_save_path("mode_comparison.png")
        plt.savefig(filepath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        logger.info(f"   [Plot] Saved comparison to: {filepath}")
        return filepath
