from __future__ import annotations

from typing import Final

# the provider receives every image under this mime type, regardless of the source
PROVIDER_IMAGE_MIME_TYPE: Final[str] = "image/jpeg"
DEFAULT_IMAGE_MIME_TYPE: Final[str] = "image/jpeg"
REGEX_DATA_URL: Final[str] = r"^data:(?P<mime_type>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^;,]+)*),"

EXTRACTION_INSTRUCTION: Final[str] = (
    "זהה את הצמח בתמונה וספק הוראות טיפול מפורטות. "
    "החזר את המידע בפורמט JSON תקין התואם לסכמה. "
    "כל הטקסט חייב להיות בעברית."
)
EXTRACTION_SYSTEM_INSTRUCTION: Final[str] = (
    "אתה בוטנאי מומחה הדובר עברית. נתח את הצמח בתמונה בצורה מדויקת. "
    "ספק פרטי טיפול מועילים, מעודדים ומדויקים בשפה העברית."
)
CHAT_SYSTEM_INSTRUCTION: Final[str] = (
    "אתה עוזר גינון ידידותי וידען בשם 'צמח-לי'. "
    "אתה עוזר למשתמשים לזהות צמחים, לפתור בעיות ולתת עצות גינון. "
    "ענה תמיד בעברית. שמור על תשובות תמציתיות אך מועילות."
)

CHAT_WELCOME_MESSAGE_ID: Final[str] = "welcome"
CHAT_WELCOME_MESSAGE: Final[str] = (
    "שלום! אני צמח-לי 🌿. אפשר לשאול אותי כל דבר על הצמחים והגינה שלך!"
)

# user-facing messages
MSG_EXTRACTION_FAILED: Final[str] = "לא הצלחנו לזהות את הצמח. נסה תמונה ברורה יותר."
MSG_IMAGE_PROCESSING_FAILED: Final[str] = (
    "שגיאה בעיבוד התמונה. נסה להוריד ולהעלות אותה כקובץ."
)
MSG_FILE_READ_FAILED: Final[str] = "לא ניתן לקרוא את הקובץ. נסה תמונה אחרת."
MSG_FETCH_FAILED: Final[str] = "לא ניתן לטעון את התמונה מקישור זה. בדוק את הקישור ונסה שוב."
MSG_CROSS_ORIGIN_BLOCKED: Final[str] = (
    "לא ניתן לטעון את התמונה מקישור זה (לרוב עקב הגבלות אבטחה של האתר). "
    "מומלץ להוריד את התמונה ולהעלות אותה כקובץ."
)
MSG_SERVICE_UNAVAILABLE: Final[str] = "השירות אינו זמין כרגע. נסה שוב מאוחר יותר."
MSG_CHAT_FAILED: Final[str] = "סליחה, אני מתקשה להתחבר לרשת כרגע. אנא נסו שוב מאוחר יותר."
