"""
AZ Metrics Monitor - Availability zone instance metrics for CloudWatch.

This package polls Auto Scaling groups and Aurora DB clusters, counts their
instances per availability zone and lifecycle state (or cluster role), and
publishes the counts as custom CloudWatch metrics.
"""

__version__ = "1.0.0"
__author__ = "AZ Metrics Team"
