"""In-page contact form state."""

from app.models.contact import SubmissionInput

SUBMIT_LABEL = "Send Message"
SENDING_LABEL = "Sending..."


class ContactForm:
    """Field values and submit control of the contact form.

    Attributes:
        name, email, subject, message: Current field values
        submit_enabled: Whether the submit control accepts clicks
        submit_label: Text shown on the submit control
    """

    def __init__(self, name: str = "", email: str = "", subject: str = "", message: str = ""):
        self.name = name
        self.email = email
        self.subject = subject
        self.message = message
        self.submit_enabled = True
        self.submit_label = SUBMIT_LABEL

    def to_input(self) -> SubmissionInput:
        return SubmissionInput(
            name=self.name, email=self.email, subject=self.subject, message=self.message
        )

    def fill(self, submission: SubmissionInput) -> None:
        self.name = submission.name or ""
        self.email = submission.email or ""
        self.subject = submission.subject or ""
        self.message = submission.message or ""

    def disable_submit(self) -> None:
        self.submit_enabled = False
        self.submit_label = SENDING_LABEL

    def enable_submit(self) -> None:
        self.submit_enabled = True
        self.submit_label = SUBMIT_LABEL

    def reset(self) -> None:
        self.name = ""
        self.email = ""
        self.subject = ""
        self.message = ""
