"""
Russian language strings for FieldBot
=====================================
"""

STRINGS = {
    # Welcome & Help
    "greeting": "Привет, {name}! 👋\n\nВыберите действие:",
    "main_menu": "Главное меню:",
    "help_message": """
📖 *Помощь*

*📝 Ввести* — выбрать тип и отправить данные. Каждая строка сообщения сохраняется отдельной записью.
*📊 Посмотреть* — записи за последние сутки по типу или все сразу.
*🗑 Удалить* — выбрать запись из списка и удалить её.
*📅 Поверка* — приборы, у которых поверка в ближайшие 3 месяца.

/start — вернуться в главное меню
""",
    "use_menu": "Используйте кнопки меню или /start",
    "access_denied": "⛔️ У вас нет доступа к боту.\nВаш ID: {user_id}",
    "access_denied_short": "⛔️ Нет доступа",

    # Buttons
    "btn_enter": "📝 Ввести",
    "btn_view": "📊 Посмотреть",
    "btn_delete": "🗑 Удалить",
    "btn_verification": "📅 Поверка",
    "btn_back": "◀️ Назад",
    "btn_all": "📋 Все",
    "btn_overheat": "🔥 Перегрев",
    "btn_deviation": "⚠️ Погрешность",
    "btn_breakdown": "🔧 Поломки",
    "btn_unclear": "❓ Непонятно",

    # Categories
    "category_overheat": "🔥 Перегрев",
    "category_deviation": "⚠️ Погрешность",
    "category_breakdown": "🔧 Поломки",
    "category_unclear": "❓ Непонятно",

    # Input
    "choose_input_category": "Выберите тип отчёта:",
    "prompt_overheat": "Введите данные по перегреву (адреса и градусы), каждую запись с новой строки:\nНапример:\nул. Ленина 5 - 85°C\nпр. Мира 12 - 92°C",
    "prompt_deviation": "Введите данные по погрешности (адреса и проценты), каждую запись с новой строки:\nНапример:\nул. Пушкина 7 - 15%\nул. Гагарина 3 - 8%",
    "prompt_breakdown": "Введите данные по поломкам (адреса и причины), каждую запись с новой строки:\nНапример:\nул. Чехова 9 - протечка трубы",
    "prompt_unclear": "Введите описание проблемы:",
    "empty_input": "⚠️ Пустое сообщение, ничего не сохранено.",
    "saved": "✅ Сохранено: {count} {noun}",
    "entry_one": "запись",
    "entry_few": "записи",
    "entry_many": "записей",

    # View
    "choose_view_category": "Что хотите посмотреть?",
    "digest_empty": "📋 Записей нет.",
    "digest_title": "📋 *Сводка по заявкам*",
    "digest_category_title": "*{category}*:",

    # Delete
    "choose_delete_category": "Записи какого типа удалить?",
    "delete_nothing": "🗑 Нечего удалять.",
    "delete_choose": "Выберите запись для удаления:",
    "delete_choose_category": "Выберите запись для удаления ({category}):",
    "delete_truncated": "Показаны последние {limit}.",
    "delete_done": "🗑 Удалено:\n{content}",
    "delete_done_short": "Удалено",
    "delete_not_found": "Запись уже удалена или не найдена",

    # Device verification
    "verification_title": "📅 *Поверка в ближайшие {months} мес.*",
    "verification_item": "{index}. {name} — {date} (через {days} дн.)",
    "verification_empty": "✅ Нет приборов с поверкой в ближайшие {months} мес.",
    "verification_file_missing": "❌ Файл с приборами не найден.",
    "verification_error": "❌ Ошибка чтения файла: {error}",

    # Errors
    "storage_error": "⚠️ Ошибка базы данных, попробуйте ещё раз позже.",
}
