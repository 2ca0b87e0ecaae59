#!/usr/bin/env python3
"""
ISHNE Plotter - plot the leads of an ISHNE Holter recording.

Usage:
    ishne-plot recording.ecg
    ishne-plot recording.ecg --leads 1,2
    ishne-plot recording.ecg --time-window 10 --start-time 60
    ishne-plot recording.ecg --stats --save stats.png
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from ..core.exceptions import FormatError, IshneError
from ..export.exporter import NANOVOLTS_PER_MILLIVOLT
from ..reader import IshneReader


class IshneDataPlotter:
    """Plotter for decoded ISHNE recordings."""

    def __init__(self, reader: IshneReader, name: str = "recording"):
        """
        Initialize the plotter.

        Args:
            reader: Reader whose header has been parsed
            name: Label used in figure titles
        """
        self.reader = reader
        self.name = name
        self.header = reader.header
        if self.header.sampling_rate <= 0:
            raise FormatError(f"Invalid sampling rate {self.header.sampling_rate}, must be positive")
        self.sample_rate = self.header.sampling_rate
        self._leads_mv: Optional[np.ndarray] = None

    @property
    def leads_mv(self) -> np.ndarray:
        """All leads in millivolts, shape (n_leads, n_samples)."""
        if self._leads_mv is None:
            samples = self.reader.decode_samples()
            resolution = np.asarray(self.header.active_resolution, dtype=np.float64)[:, None]
            self._leads_mv = samples.data * resolution / NANOVOLTS_PER_MILLIVOLT
        return self._leads_mv

    def plot_leads(self, leads: Optional[List[int]] = None, time_window: Optional[float] = None,
                   start_time: Optional[float] = None):
        """
        Plot ECG leads.

        Args:
            leads: Lead numbers to plot (1-based), None for all
            time_window: Time window in seconds to plot, None for all data
            start_time: Start time offset in seconds, None for beginning
        """
        data = self.leads_mv
        n_total = data.shape[1]

        if leads is None:
            leads = list(range(1, self.header.n_leads + 1))
        leads = [lead for lead in leads if 1 <= lead <= self.header.n_leads]
        if not leads:
            raise ValueError(f"No valid leads selected (recording has {self.header.n_leads})")

        start_idx = int((start_time or 0) * self.sample_rate)
        start_idx = min(max(start_idx, 0), n_total)
        stop_idx = n_total
        if time_window is not None:
            stop_idx = min(n_total, start_idx + int(time_window * self.sample_rate))

        time_seconds = np.arange(start_idx, stop_idx) / self.sample_rate
        names = self.header.lead_names

        fig, axes = plt.subplots(len(leads), 1, figsize=(15, 2 * len(leads)), sharex=True, squeeze=False)
        axes = axes[:, 0]

        for ax, lead in zip(axes, leads):
            values = data[lead - 1, start_idx:stop_idx]
            ax.plot(time_seconds, values, 'b-', linewidth=0.8, alpha=0.8)
            ax.set_ylabel(f'{names[lead - 1]}\n(mV)', fontsize=10)
            ax.grid(True, alpha=0.3)
            if values.size:
                ax.set_xlim(time_seconds[0], time_seconds[-1])
                ax.set_title(f'Lead {lead} ({names[lead - 1]}) - Mean: {values.mean():.4f}mV, '
                             f'Std: {values.std():.4f}mV', fontsize=9, pad=5)

        axes[-1].set_xlabel('Time (seconds)', fontsize=12)

        duration = (stop_idx - start_idx) / self.sample_rate
        fig.suptitle(f'ISHNE Recording - {self.name}\nStart: T+{start_idx / self.sample_rate:.3f}s, '
                     f'Duration: {duration:.1f}s, Sample Rate: {self.sample_rate} Hz',
                     fontsize=14, y=0.98)

        plt.tight_layout()
        plt.subplots_adjust(top=0.92)

        return fig

    def plot_statistics(self):
        """Plot per-lead statistics."""
        data = self.leads_mv
        labels = [f'L{i + 1} {name}' for i, name in enumerate(self.header.lead_names)]
        if data.shape[1] == 0:
            raise ValueError("Recording holds no samples")

        means = data.mean(axis=1)
        stds = data.std(axis=1)
        mins = data.min(axis=1)
        maxs = data.max(axis=1)

        fig, axes = plt.subplots(2, 2, figsize=(14, 10))
        x = np.arange(len(labels))

        axes[0, 0].bar(labels, means, color='skyblue', alpha=0.7)
        axes[0, 0].set_title('Mean Values by Lead')
        axes[0, 0].set_ylabel('Mean (mV)')

        axes[0, 1].bar(labels, stds, color='lightcoral', alpha=0.7)
        axes[0, 1].set_title('Standard Deviation by Lead')
        axes[0, 1].set_ylabel('Std Dev (mV)')

        axes[1, 0].bar(x, maxs, color='lightgreen', alpha=0.7, label='Max')
        axes[1, 0].bar(x, mins, color='orange', alpha=0.7, label='Min')
        axes[1, 0].set_title('Min/Max Values by Lead')
        axes[1, 0].set_ylabel('Value (mV)')
        axes[1, 0].set_xticks(x)
        axes[1, 0].set_xticklabels(labels)
        axes[1, 0].legend()

        axes[1, 1].bar(labels, maxs - mins, color='gold', alpha=0.7)
        axes[1, 1].set_title('Range (Max - Min) by Lead')
        axes[1, 1].set_ylabel('Range (mV)')

        for ax in axes.flat:
            ax.tick_params(axis='x', rotation=45)

        plt.tight_layout()
        plt.suptitle(f'ISHNE Recording Statistics - {self.name}', fontsize=14, y=0.98)
        plt.subplots_adjust(top=0.92)

        return fig


def parse_leads(spec: str) -> List[int]:
    """Parse a lead selection such as "1,2,3" or "1-4"."""
    if '-' in spec:
        start, end = map(int, spec.split('-'))
        return list(range(start, end + 1))
    return [int(c.strip()) for c in spec.split(',')]


def main(argv: Optional[List[str]] = None) -> int:
    """Main function with command line interface."""
    parser = argparse.ArgumentParser(description='Plot ECG leads from ISHNE Holter files')
    parser.add_argument('input', help='ISHNE file to plot')
    parser.add_argument('--leads', '-l', type=str, help='Leads to plot (e.g., "1,2,3" or "1-3")')
    parser.add_argument('--time-window', '-t', type=float, help='Time window in seconds to plot')
    parser.add_argument('--start-time', '-s', type=float, help='Start time offset in seconds')
    parser.add_argument('--statistics', '--stats', action='store_true', help='Show statistics plots')
    parser.add_argument('--save', help='Save plot to file (specify filename)')

    args = parser.parse_args(argv)

    leads = None
    if args.leads:
        try:
            leads = parse_leads(args.leads)
        except ValueError:
            parser.error(f"Invalid lead specification '{args.leads}'")

    try:
        reader = IshneReader.from_file(args.input)
        reader.parse_header()
        plotter = IshneDataPlotter(reader, name=Path(args.input).name)
        if args.statistics:
            fig = plotter.plot_statistics()
        else:
            fig = plotter.plot_leads(leads=leads, time_window=args.time_window, start_time=args.start_time)
    except (IshneError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.save:
        print(f"Saving plot to {args.save}")
        fig.savefig(args.save, dpi=300, bbox_inches='tight')
    else:
        plt.show()

    return 0


if __name__ == "__main__":
    sys.exit(main())
