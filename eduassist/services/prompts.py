"""Instruction templates for each AI gateway task.

All templates are Arabic; the assistant answers students in Arabic unless a
translation task asks otherwise.
"""

TUTOR_SYSTEM_PROMPT = """أنت مساعد تعليمي ذكي باللغة العربية متخصص في التعليم الأكاديمي. مهمتك هي:
1. مساعدة الطلاب في فهم المواد الدراسية
2. توليد أسئلة تقييمية مناسبة
3. تحليل نقاط الضعف وتقديم التوصيات
4. الإجابة على الاستفسارات الأكاديمية بوضوح
{subject_line}
تأكد من الإجابة باللغة العربية وبطريقة واضحة ومفيدة للطالب."""

JSON_SYSTEM_PROMPT = (
    "أنت مساعد تعليمي. أجب دائماً بكائن JSON واحد صالح فقط، "
    "دون أي نص قبله أو بعده ودون علامات تنسيق."
)

QUESTIONS_PROMPT = """قم بإنشاء {count} أسئلة اختيار من متعدد باللغة العربية للموضوع التالي:
الموضوع: {subject}
{chapter_line}
مستوى الصعوبة: {difficulty}

يجب أن تكون الأسئلة:
1. واضحة ومحددة
2. لها 4 خيارات بالضبط (أ، ب، ج، د)
3. إجابة واحدة صحيحة فقط
4. مع شرح للإجابة الصحيحة

أرجع النتيجة بصيغة JSON مع هذا التنسيق:
{{
  "questions": [
    {{
      "question": "نص السؤال",
      "options": ["أ) الخيار الأول", "ب) الخيار الثاني", "ج) الخيار الثالث", "د) الخيار الرابع"],
      "correct_answer": 0,
      "explanation": "شرح الإجابة الصحيحة",
      "difficulty": "{difficulty}"
    }}
  ]
}}"""

PERFORMANCE_PROMPT = """حلل أداء الطالب التالي وحدد نقاط الضعف والتوصيات:

الموضوع: {subject}
{chapter_line}
عدد الأسئلة الكلي: {total_questions}
الإجابات الصحيحة: {correct_answers}
النسبة: {score}%

الأسئلة والإجابات:
{answer_pattern}

حدد:
1. نقاط الضعف الرئيسية (إذا كانت النسبة أقل من 60%)
2. التوصيات للتحسين
3. المواضيع التي تحتاج مراجعة

أرجع النتيجة بصيغة JSON:
{{
  "weak_areas": ["نقطة ضعف 1", "نقطة ضعف 2"],
  "recommendations": ["توصية 1", "توصية 2", "توصية 3"]
}}"""

SUMMARY_PROMPTS = {
    "general": "اكتب ملخصاً شاملاً للمحتوى التالي:\n\n{content}",
    "weaknesses": "اكتب ملخصاً يركز على نقاط الضعف التي يجب تقويتها من المحتوى التالي:\n\n{content}",
    "forgotten_points": "اكتب ملخصاً للنقاط المهمة التي قد ينساها الطالب من المحتوى التالي:\n\n{content}",
    "clarifications": "اكتب ملخصاً يوضح النقاط الغامضة والمعقدة من المحتوى التالي:\n\n{content}",
}

SUMMARY_FOCUS_SUFFIX = "\n\nركز على هذه المناطق: {focus_areas}"

DOCUMENT_PROMPT = """حلل محتوى هذا الملف الأكاديمي وحدد:
1. الموضوع/المادة الدراسية
2. المواضيع الرئيسية المغطاة
3. ملخص مختصر للمحتوى

اسم الملف: {file_name}
المحتوى:
{content}

أرجع النتيجة بصيغة JSON:
{{
  "subject": "اسم المادة/الموضوع",
  "topics": ["موضوع 1", "موضوع 2", "موضوع 3"],
  "summary": "ملخص مختصر للمحتوى"
}}"""

TRANSLATOR_SYSTEM_PROMPT = "أنت مترجم أكاديمي محترف."

TRANSLATION_LANGUAGES = {
    "ar": "العربية",
    "en": "الإنجليزية",
}

TRANSLATION_PROMPT = """ترجم النص التالي إلى اللغة {language} مع الحفاظ على المصطلحات الأكاديمية والعلمية.
أرجع الترجمة فقط.

{content}"""
