"""Business-logic layer for global notices.

- alert_store.py (AlertStore contract + errors)
- mongo_alert_store.py / memory_alert_store.py (store implementations)
- active_alerts.py (active-alert cache refreshed after every mutation)
"""
