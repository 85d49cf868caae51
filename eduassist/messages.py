"""User-facing message catalog.

Every error or status string returned to a client goes through ``t()`` so the
language can be switched with the ``DEFAULT_LANGUAGE`` setting.
"""

from eduassist.config import get_settings

MESSAGES: dict[str, dict[str, str]] = {
    "ar": {
        "not_authenticated": "غير مصرح. يرجى تسجيل الدخول.",
        "invalid_credentials": "تعذر التحقق من بيانات الدخول.",
        "not_found": "المورد غير موجود.",
        "session_not_found": "جلسة المحادثة غير موجودة.",
        "validation_failed": "البيانات المرسلة غير صالحة.",
        "invalid_plan": "خطة اشتراك غير صالحة.",
        "email_required": "البريد الإلكتروني مطلوب.",
        "no_sessions_remaining": "لا توجد جلسات متبقية. يرجى تجديد الاشتراك.",
        "no_file": "لم يتم رفع أي ملف.",
        "unsupported_file_type": "نوع الملف غير مدعوم. يرجى رفع ملفات PDF أو Word فقط.",
        "file_too_large": "حجم الملف يتجاوز الحد المسموح (10 ميغابايت).",
        "upload_failed": "فشل في رفع الملف.",
        "upload_analyzed": "تم رفع الملف وتحليله بنجاح.",
        "upload_not_analyzed": "تم رفع الملف ولكن فشل في تحليله.",
        "upload_ok": "تم رفع الملف بنجاح.",
        "invalid_ticket_transition": "لا يمكن تغيير حالة طلب الدعم إلى الحالة المطلوبة.",
        "chat_failed": "فشل في الحصول على استجابة من المساعد الذكي.",
        "questions_failed": "فشل في توليد الأسئلة التقييمية.",
        "performance_failed": "فشل في تحليل الأداء.",
        "summary_failed": "فشل في إنشاء الملخص.",
        "document_failed": "فشل في تحليل محتوى الملف.",
        "translation_failed": "فشل في ترجمة المحتوى.",
        "subscription_failed": "فشل في إنشاء الاشتراك.",
        "internal_error": "حدث خطأ داخلي غير متوقع.",
        "summary_unavailable": "لا يمكن إنشاء الملخص في الوقت الحالي.",
        "subject_unknown": "غير محدد",
        "no_summary": "لا يوجد ملخص متاح",
    },
    "en": {
        "not_authenticated": "Not authenticated.",
        "invalid_credentials": "Could not validate credentials.",
        "not_found": "Resource not found.",
        "session_not_found": "Chat session not found.",
        "validation_failed": "Validation failed.",
        "invalid_plan": "Invalid subscription plan.",
        "email_required": "An email address is required.",
        "no_sessions_remaining": "No sessions remaining. Please renew your subscription.",
        "no_file": "No file was uploaded.",
        "unsupported_file_type": "Unsupported file type. Please upload PDF or Word files only.",
        "file_too_large": "File exceeds the maximum allowed size (10 MiB).",
        "upload_failed": "File upload failed.",
        "upload_analyzed": "File uploaded and analyzed successfully.",
        "upload_not_analyzed": "File uploaded but analysis failed.",
        "upload_ok": "File uploaded successfully.",
        "invalid_ticket_transition": "The support ticket cannot move to the requested status.",
        "chat_failed": "Failed to get a response from the assistant.",
        "questions_failed": "Failed to generate assessment questions.",
        "performance_failed": "Failed to analyze performance.",
        "summary_failed": "Failed to generate the summary.",
        "document_failed": "Failed to analyze the file content.",
        "translation_failed": "Failed to translate the content.",
        "subscription_failed": "Failed to create the subscription.",
        "internal_error": "An unexpected internal server error occurred.",
        "summary_unavailable": "The summary cannot be generated right now.",
        "subject_unknown": "Unspecified",
        "no_summary": "No summary available",
    },
}


def t(key: str, language: str | None = None) -> str:
    """Look up a message in the configured language, falling back to the key."""
    lang = language or get_settings().default_language
    return MESSAGES.get(lang, MESSAGES["ar"]).get(key, key)
