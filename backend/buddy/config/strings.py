# /buddy/config/strings.py

# This file contains all user-facing strings, keyed by template name and then by
# language. Flow and router logic only ever refers to the keys; rendering goes
# through buddy.services.string_service.

SUPPORTED_LANGUAGES = ("hindi", "english", "hinglish")
DEFAULT_LANGUAGE = "hinglish"

MESSAGES = {
    # --- General ---
    "greeting": {
        "hinglish": "Hey! Aaj kya plan hai? 😊",
        "hindi": "नमस्ते! आज का क्या प्लान है? 😊",
        "english": "Hey! What's the plan for today? 😊",
    },
    "help_menu": {
        "hinglish": "Main task add kar sakta hoon, alarm ya reminder laga sakta hoon, notes likh sakta hoon. Kya karna hai?",
        "hindi": "मैं task जोड़ सकता हूँ, alarm या reminder लगा सकता हूँ, notes लिख सकता हूँ। क्या करना है?",
        "english": "I can add tasks, set alarms or reminders, and take notes. What would you like to do?",
    },
    "let_me_help": {
        "hinglish": "Batao, main kaise help karoon? 🙂",
        "hindi": "बताओ, मैं कैसे मदद करूँ? 🙂",
        "english": "Let me help you. What do you need? 🙂",
    },
    "generic_error": {
        "hinglish": "Oops, kuch gadbad ho gayi. Ek baar phir try karo! 🙏",
        "hindi": "ओह, कुछ गड़बड़ हो गई। एक बार फिर कोशिश करो! 🙏",
        "english": "Oops, something went wrong. Please try again! 🙏",
    },
    "cancelled": {
        "hinglish": "Theek hai, chhod diya. Aur kuch?",
        "hindi": "ठीक है, छोड़ दिया। और कुछ?",
        "english": "Okay, cancelled. Anything else?",
    },
    "done_generic": {
        "hinglish": "Ho gaya! ✅",
        "hindi": "हो गया! ✅",
        "english": "Done! ✅",
    },
    "hmm": {
        "hinglish": "Hmm... thoda aur batao?",
        "hindi": "हम्म... थोड़ा और बताओ?",
        "english": "Hmm... could you tell me a bit more?",
    },
    "one_at_a_time": {
        "hinglish": "Pehla add ho gaya! Baaki {remaining} ek ek karke batao.",
        "hindi": "पहला जुड़ गया! बाकी {remaining} एक-एक करके बताओ।",
        "english": "Added the first one! Tell me the other {remaining} one at a time.",
    },

    # --- Quick action labels ---
    "qa_add_task": {"hinglish": "➕ Task add karo", "hindi": "➕ Task जोड़ो", "english": "➕ Add task"},
    "qa_alarm": {"hinglish": "⏰ Alarm lagao", "hindi": "⏰ Alarm लगाओ", "english": "⏰ Set alarm"},
    "qa_reminder": {"hinglish": "🔔 Reminder", "hindi": "🔔 Reminder", "english": "🔔 Reminder"},
    "qa_check_task": {"hinglish": "✅ Task done", "hindi": "✅ Task पूरा", "english": "✅ Complete task"},
    "qa_plan_day": {"hinglish": "🗓️ Din plan karo", "hindi": "🗓️ दिन की योजना", "english": "🗓️ Plan my day"},
    "qa_notes": {"hinglish": "📝 Notes", "hindi": "📝 Notes", "english": "📝 Notes"},
    "qa_lets_start": {"hinglish": "Chalo shuru karein!", "hindi": "चलो शुरू करें!", "english": "Let's Start!"},

    # --- Schedule fragments ---
    "day_today": {"hinglish": "aaj", "hindi": "आज", "english": "today"},
    "day_tomorrow": {"hinglish": "kal", "hindi": "कल", "english": "tomorrow"},
    "day_on": {"hinglish": "{date} ko", "hindi": "{date} को", "english": "on {date}"},
    "schedule_at": {"hinglish": "{time} pe", "hindi": "{time} पर", "english": "at {time}"},
    "schedule_range": {"hinglish": "{start} - {end}", "hindi": "{start} - {end}", "english": "{start} - {end}"},
    "part_morning": {"hinglish": "subah", "hindi": "सुबह", "english": "morning"},
    "part_afternoon": {"hinglish": "dopahar", "hindi": "दोपहर", "english": "afternoon"},
    "part_evening": {"hinglish": "shaam", "hindi": "शाम", "english": "evening"},
    "repeat_once": {"hinglish": "ek baar", "hindi": "एक बार", "english": "once"},
    "repeat_daily": {"hinglish": "roz", "hindi": "रोज़", "english": "daily"},
    "repeat_custom": {"hinglish": "custom", "hindi": "custom", "english": "custom"},

    # --- add_task flow ---
    "add_task_ask_title": {
        "hinglish": "Kaunsa task add karna hai? 📝",
        "hindi": "कौन सा task जोड़ना है? 📝",
        "english": "What task should I add? 📝",
    },
    "add_task_ask_time": {
        "hinglish": "\"{title}\" kis time pe karna hai? (jaise 9am, 6-7pm)",
        "hindi": "\"{title}\" किस समय करना है? (जैसे 9am, 6-7pm)",
        "english": "What time for \"{title}\"? (e.g. 9am, 6-7pm)",
    },
    "add_task_done": {
        "hinglish": "✅ \"{title}\" task add ho gaya ({day}, {schedule})!",
        "hindi": "✅ \"{title}\" task जुड़ गया ({day}, {schedule})!",
        "english": "✅ Added \"{title}\" ({day}, {schedule})!",
    },

    # --- alarm flow ---
    "alarm_ask_time": {
        "hinglish": "⏰ Alarm kitne baje ka lagaun?",
        "hindi": "⏰ Alarm कितने बजे का लगाऊँ?",
        "english": "⏰ What time should I set the alarm for?",
    },
    "alarm_ask_ampm": {
        "hinglish": "⏰ {time} — subah (AM) ya shaam (PM)?",
        "hindi": "⏰ {time} — सुबह (AM) या शाम (PM)?",
        "english": "⏰ {time} — AM or PM?",
    },
    "alarm_ask_ampm_retry": {
        "hinglish": "Samjha nahi 😅 {time} subah ka (AM) ya shaam ka (PM)?",
        "hindi": "समझ नहीं आया 😅 {time} सुबह (AM) या शाम (PM)?",
        "english": "Sorry, I didn't get that 😅 Is {time} AM or PM?",
    },
    "alarm_done": {
        "hinglish": "⏰ \"{label}\" alarm set ho gaya — {day} {time} ({repeat})!",
        "hindi": "⏰ \"{label}\" alarm लग गया — {day} {time} ({repeat})!",
        "english": "⏰ \"{label}\" alarm set for {day} at {time} ({repeat})!",
    },

    # --- reminder flow ---
    "reminder_ask_what": {
        "hinglish": "🔔 Kis baare mein yaad dilaun?",
        "hindi": "🔔 किस बारे में याद दिलाऊँ?",
        "english": "🔔 What should I remind you about?",
    },
    "reminder_ask_when": {
        "hinglish": "🔔 \"{message}\" — kab yaad dilaun? (jaise 5 min mein, 6pm)",
        "hindi": "🔔 \"{message}\" — कब याद दिलाऊँ? (जैसे 5 मिनट में, 6pm)",
        "english": "🔔 \"{message}\" — when should I remind you? (e.g. in 5 min, 6pm)",
    },
    "reminder_done": {
        "hinglish": "👍 Done! {day} {time} pe yaad dila dunga: \"{message}\"",
        "hindi": "👍 हो गया! {day} {time} पर याद दिला दूँगा: \"{message}\"",
        "english": "👍 Done! I'll remind you {day} at {time}: \"{message}\"",
    },

    # --- check_task flow ---
    "check_all_done": {
        "hinglish": "🎉 Koi pending task nahi hai! Sab ho gaya, mast!",
        "hindi": "🎉 कोई pending task नहीं है! सब हो गया, शाबाश!",
        "english": "🎉 No pending tasks! You're all caught up!",
    },
    "check_ask_pick": {
        "hinglish": "Kaunsa task ho gaya? Number ya naam batao:\n{task_list}",
        "hindi": "कौन सा task हो गया? नंबर या नाम बताओ:\n{task_list}",
        "english": "Which task did you finish? Reply with a number or name:\n{task_list}",
    },
    "delete_ask_pick": {
        "hinglish": "Kaunsa task hatana hai? Number ya naam batao:\n{task_list}",
        "hindi": "कौन सा task हटाना है? नंबर या नाम बताओ:\n{task_list}",
        "english": "Which task should I delete? Reply with a number or name:\n{task_list}",
    },
    "check_no_match": {
        "hinglish": "Mujhe \"{query}\" task nahi mila. Inme se kaunsa?\n{task_list}",
        "hindi": "मुझे \"{query}\" task नहीं मिला। इनमें से कौन सा?\n{task_list}",
        "english": "I couldn't find \"{query}\". Which one of these?\n{task_list}",
    },
    "check_done": {
        "hinglish": "🎉 Awesome! \"{title}\" complete! Agli task ready ho?",
        "hindi": "🎉 बहुत बढ़िया! \"{title}\" पूरा! अगला task तैयार?",
        "english": "🎉 Awesome! \"{title}\" is done! Ready for the next one?",
    },
    "delete_done": {
        "hinglish": "🗑️ \"{title}\" task delete ho gaya!",
        "hindi": "🗑️ \"{title}\" task हटा दिया!",
        "english": "🗑️ Deleted \"{title}\"!",
    },

    # --- plan_day flow ---
    "plan_no_tasks": {
        "hinglish": "Aaj ke liye abhi koi task nahi hai. Pehle kuch tasks add karein?",
        "hindi": "आज के लिए अभी कोई task नहीं है। पहले कुछ tasks जोड़ें?",
        "english": "You have no tasks for today yet. Want to add a few first?",
    },
    "plan_all_done": {
        "hinglish": "🎉 Aaj ke saare {total} tasks ho gaye! Ab thoda rest karo.",
        "hindi": "🎉 आज के सारे {total} tasks हो गए! अब थोड़ा आराम करो।",
        "english": "🎉 All {total} tasks are done for today! Time to rest.",
    },
    "plan_fallback": {
        "hinglish": "🗓️ Aaj ka plan ({pending} pending):\n{task_list}\nPehle wale se shuru karo!",
        "hindi": "🗓️ आज का प्लान ({pending} बाकी):\n{task_list}\nपहले वाले से शुरू करो!",
        "english": "🗓️ Here's your plan ({pending} pending):\n{task_list}\nStart with the first one!",
    },

    # --- notes flow ---
    "notes_ask_content": {
        "hinglish": "📝 Bolo, kya likhun?",
        "hindi": "📝 बोलो, क्या लिखूँ?",
        "english": "📝 Go ahead, what should I note down?",
    },
    "notes_done": {
        "hinglish": "📝 Note kar liya!",
        "hindi": "📝 नोट कर लिया!",
        "english": "📝 Noted!",
    },
    "notes_replaced": {
        "hinglish": "📝 Notes naye content se replace ho gaye!",
        "hindi": "📝 Notes नए content से बदल दिए!",
        "english": "📝 Notes replaced with the new content!",
    },

    # --- Check-ins ---
    "task_reminder": {
        "hinglish": "⏰ \"{title}\" 10 min mein start hone wala hai ({start_time} pe). Ready ho jao!",
        "hindi": "⏰ \"{title}\" 10 मिनट में शुरू होगा ({start_time} पर)। तैयार हो जाओ!",
        "english": "⏰ \"{title}\" starts in 10 minutes (at {start_time}). Get ready!",
    },
    "task_checkin": {
        "hinglish": "🤔 \"{title}\" ho gaya kya? Agar nahi hua to koi baat nahi - main help kar sakta hoon!",
        "hindi": "🤔 \"{title}\" हो गया क्या? अगर नहीं हुआ तो कोई बात नहीं - मैं मदद कर सकता हूँ!",
        "english": "🤔 Did you finish \"{title}\"? If not, no worries - I can help!",
    },
    "proactive_morning": {
        "hinglish": "Morning! Aaj {total} tasks hain, {pending} pending. Kaunsa pehle karoge?",
        "hindi": "सुप्रभात! आज {total} tasks हैं, {pending} बाकी। कौन सा पहले करोगे?",
        "english": "Good morning! You have {total} tasks today, {pending} pending. Which one first?",
    },
    "proactive_midday": {
        "hinglish": "Lunch time! {completed}/{total} tasks done. Badhiya chal raha hai!",
        "hindi": "लंच का समय! {completed}/{total} tasks पूरे। बढ़िया चल रहा है!",
        "english": "Lunch time! {completed}/{total} tasks done. Nice going!",
    },
    "proactive_afternoon": {
        "hinglish": "Afternoon ho gayi, {pending} tasks bache hain. Final push?",
        "hindi": "दोपहर हो गई, {pending} tasks बाकी हैं। आखिरी ज़ोर?",
        "english": "It's afternoon and {pending} tasks are left. Ready for a final push?",
    },
    "proactive_evening": {
        "hinglish": "Shaam ho gayi! {completed}/{total} done. Bache hue tasks complete karo?",
        "hindi": "शाम हो गयी! {completed}/{total} पूरे हुए। बाकी complete करें?",
        "english": "Evening! {completed}/{total} done. Ready to finish the rest?",
    },
    "proactive_night": {
        "hinglish": "Raat ho gayi. Aaj {completed}/{total} tasks kiye — proud of you! Ab aaram karo 🌙",
        "hindi": "रात हो गई। आज {completed}/{total} tasks किए — शाबाश! अब आराम करो 🌙",
        "english": "It's night. You did {completed}/{total} tasks today — proud of you! Get some rest 🌙",
    },
    "motivation_fallback": {
        "hinglish": "{completed}/{total} ho gaye, ek ek karke sab ho jayega. Tum kar sakte ho! 💪",
        "hindi": "{completed}/{total} पूरे हो गए, एक एक करके सब हो जाएगा। तुम कर सकते हो! 💪",
        "english": "{completed}/{total} done so far. One step at a time, you've got this! 💪",
    },
}
