"""Personal expense tracker: multi-currency monthly totals and budget alerts."""
