"""
Workspace Recommender - assignee, priority, response-time and
similar-ticket recommendations over a workspace's ticket history
"""

__version__ = "1.0.0"
