"""
WA Message Scheduler

Pick a phone number, a message and a time; when the time comes a
reminder is shown and WhatsApp opens with the message pre-filled.
"""

__version__ = "0.1.0"
