"""Forms for the schedule blueprint."""

from flask_wtf import FlaskForm
from flask_wtf.file import FileAllowed, FileField, FileRequired

from lems.core.constants import SCHEDULE_FILE_EXTENSIONS


class ScheduleUploadForm(FlaskForm):
    """Form for uploading an exported schedule file."""

    file = FileField(
        "Schedule",
        validators=[
            FileRequired(),
            FileAllowed(SCHEDULE_FILE_EXTENSIONS, "CSV files only!"),
        ],
    )
