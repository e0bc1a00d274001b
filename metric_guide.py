"""Human-readable metric definitions for the app."""

METRIC_GUIDE = [
    {
        "Metric": "Total users",
        "Meaning": "All registered users (active and new) in the latest sample. Signups are not included.",
        "Formula": "total_users(last sample)",
    },
    {
        "Metric": "Active users",
        "Meaning": "Users that have signed in at least once.",
        "Formula": "total_users - new_users",
    },
    {
        "Metric": "Inactive (new) users",
        "Meaning": "Users that have never completed their first sign-in.",
        "Formula": "new_users(last sample)",
    },
    {
        "Metric": "Admin deleted",
        "Meaning": "Accounts deleted by administrators since the start of data.",
        "Formula": "deleted_active + deleted_inactive (last sample)",
    },
    {
        "Metric": "Signup requests",
        "Meaning": "Cumulative signup requests, with approvals and rejections.",
        "Formula": "total_requests, accepted_requests, rejected_requests (last sample)",
    },
    {
        "Metric": "Average signups / day",
        "Meaning": "Simple daily average of signup requests since the first sample.",
        "Formula": "total_requests / max(1, days between first and last sample)",
    },
    {
        "Metric": "Average deletions / day",
        "Meaning": "Simple daily average of administrator deletions.",
        "Formula": "total_admin_deleted / max(1, days)",
    },
    {
        "Metric": "Average growth / day",
        "Meaning": "Approved signups minus deletions, per day.",
        "Formula": "average accepted / day - average deletions / day",
    },
    {
        "Metric": "User Totals chart",
        "Meaning": "Active and new users, one bar per day (the later sample of each day).",
        "Formula": "samples[1], samples[3], ...",
    },
    {
        "Metric": "Signup Totals chart",
        "Meaning": "Accepted and rejected signups since the previous sample.",
        "Formula": "accepted_requests - previous, rejected_requests - previous",
    },
    {
        "Metric": "Deletions chart",
        "Meaning": "Active and inactive accounts deleted by administrators since the previous sample.",
        "Formula": "deleted_active - previous, deleted_inactive - previous",
    },
    {
        "Metric": "Activity charts",
        "Meaning": "Share of active users that signed in within the last 1, 7, 30 or 90 days.",
        "Formula": "active_N * 100 / active_users (truncated)",
    },
    {
        "Metric": "Average activity chart",
        "Meaning": "Average number of days since active users last signed in.",
        "Formula": "active_avg",
    },
]
