"""Development entry point: print the dashboard state for the configured data."""

import json
import sys

from plantview.dashboard import create_dashboard

dashboard = create_dashboard()


def main(argv=None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if argv:
        # key=value pairs, e.g. preset=previous-3-months machine=M-01
        args = dict(arg.split("=", 1) for arg in argv if "=" in arg)
        dashboard.apply_args(args)

    out = {
        "filters": dashboard.filter_state(),
        "gauges": dashboard.gauges(),
        "charts": {name: chart.payload() for name, chart in dashboard.charts.items()},
    }
    print(json.dumps(out, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
