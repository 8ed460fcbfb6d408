"""Notifications app package.

Delivers booking notifications by e-mail after the booking transaction
commits, keeps an in-app copy for each recipient and sends the daily
move-in reminders.
"""
