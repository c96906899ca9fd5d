"""goesctl: download GOES satellite imagery over a time range.

goesctl retrieves the full disk GEOCOLOR snapshots that NOAA publishes every
10 minutes for GOES-East and GOES-West, for any window within the last five
days, and stores them into a dedicated folder named after the window.

The library handles:
- Flexible time expressions (absolute start, or an offset such as "2h30m")
- Alignment of the window on the 10-minute publication cadence
- Bounded parallel downloads where a failed image never stops the others

Example:
    >>> from goesctl.downloaders import HTTPDownloader
    >>> from goesctl.pipeline import PipelineConfig, run_pipeline
    >>> from goesctl.sources import GOESImagery
    >>>
    >>> config = PipelineConfig(ago="2h", duration="1h", stride_minutes=20, root=Path("data"))
    >>> report = run_pipeline(config, imagery=GOESImagery("east"), downloader=HTTPDownloader())
    >>> [outcome.path for outcome in report.saved]
"""
