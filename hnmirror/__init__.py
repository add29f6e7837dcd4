"""
Mirror the Hacker News front page into a subreddit without reposting duplicates.
"""

__version__ = "0.1.0"
