"""Tweetfleet Slack gateway."""
