"""HTTP surface: app sessions, screen views and the commands each screen offers."""
