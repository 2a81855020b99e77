from .contact import Contact
from .newsletter_subscription import NewsletterSubscription
from .waitlist_entry import WaitlistEntry
