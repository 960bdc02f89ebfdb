"""
Canned translations for the phrases the heuristic generator emits.

Keys are the canonical English phrase stored as a rule's neutral title or
notes. Plans created before localized fields existed only carry that
phrase, so these tables also backfill their translations at read time.
"""
from types import MappingProxyType

from agroplan.models.farming_plan import LocalizedText

TITLE_PHRASES = MappingProxyType(
    {
        # Common titles
        "Field scouting (pests, disease, weeds, moisture)": LocalizedText(
            en="Field scouting (pests, disease, weeds, moisture)",
            hi="खेत का निरीक्षण (कीट, रोग, खरपतवार, नमी)",
            bn="ক্ষেত পর্যবেক্ষণ (পোকামাকড়, রোগ, আগাছা, আর্দ্রতা)",
        ),
        "Check drainage & remove standing water (monsoon)": LocalizedText(
            en="Check drainage & remove standing water (monsoon)",
            hi="जल निकासी जांचें और जमा पानी हटाएं (मानसून)",
            bn="নিষ্কাশন পরীক্ষা করুন এবং জমা জল সরান (বর্ষা)",
        ),
        "Water/irrigate (as per stage)": LocalizedText(
            en="Water/irrigate (as per stage)",
            hi="सिंचाई करें (अवस्था के अनुसार)",
            bn="সেচ দিন (পর্যায় অনুযায়ী)",
        ),
        "Harvest window starts (plan labor, bags, storage, drying)": LocalizedText(
            en="Harvest window starts (plan labor, bags, storage, drying)",
            hi="फसल कटाई का समय शुरू (मजदूर, बोरी, भंडारण, सुखाने की योजना बनाएं)",
            bn="ফসল কাটার সময় শুরু (শ্রমিক, বস্তা, সংরক্ষণ, শুকানোর পরিকল্পনা করুন)",
        ),

        # Rice/Paddy specific
        "Basal fertilization (FYM/compost + recommended NPK) and zinc if needed": LocalizedText(
            en="Basal fertilization (FYM/compost + recommended NPK) and zinc if needed",
            hi="आधार उर्वरक (गोबर खाद/कम्पोस्ट + अनुशंसित NPK) और जिंक यदि आवश्यक हो",
            bn="বেসাল সার (গোবর সার/কম্পোস্ট + প্রস্তাবিত NPK) এবং প্রয়োজনে জিঙ্ক",
        ),
        "Top dress nitrogen (tillering stage)": LocalizedText(
            en="Top dress nitrogen (tillering stage)",
            hi="नाइट्रोजन की टॉप ड्रेसिंग (कल्ले निकलने की अवस्था)",
            bn="টপ ড্রেসিং নাইট্রোজেন (কুশি পর্যায়)",
        ),
        "Top dress nitrogen/potash (panicle initiation)": LocalizedText(
            en="Top dress nitrogen/potash (panicle initiation)",
            hi="नाइट्रोजन/पोटाश की टॉप ड्रेसिंग (बाली निकलने की शुरुआत)",
            bn="নাইট্রোজেন/পটাশ টপ ড্রেসিং (শীষ উদ্গমন)",
        ),
        "Install pheromone/light traps (stem borer/leaf folder monitoring)": LocalizedText(
            en="Install pheromone/light traps (stem borer/leaf folder monitoring)",
            hi="फेरोमोन/लाइट ट्रैप लगाएं (तना छेदक/पत्ती मोड़क की निगरानी)",
            bn="ফেরোমন/লাইট ট্র্যাপ লাগান (কাণ্ড ছিদ্রকারী/পাতা মোড়ক পর্যবেক্ষণ)",
        ),

        # Wheat specific
        "Irrigation #1 (Crown Root Initiation - CRI)": LocalizedText(
            en="Irrigation #1 (Crown Root Initiation - CRI)",
            hi="सिंचाई #1 (क्राउन रूट इनिशिएशन - CRI)",
            bn="সেচ #1 (ক্রাউন রুট ইনিশিয়েশন - CRI)",
        ),
        "Irrigation #2 (Tillering)": LocalizedText(
            en="Irrigation #2 (Tillering)",
            hi="सिंचाई #2 (कल्ले निकलना)",
            bn="সেচ #2 (কুশি)",
        ),
        "Irrigation #3 (Jointing/Booting)": LocalizedText(
            en="Irrigation #3 (Jointing/Booting)",
            hi="सिंचाई #3 (गांठ बनना/बूटिंग)",
            bn="সেচ #3 (জয়েন্টিং/বুটিং)",
        ),
        "Irrigation #4 (Heading/Flowering)": LocalizedText(
            en="Irrigation #4 (Heading/Flowering)",
            hi="सिंचाई #4 (बाली निकलना/फूल आना)",
            bn="সেচ #4 (শীষ উদ্গমন/ফুল)",
        ),
        "Irrigation #5 (Milking/Dough stage)": LocalizedText(
            en="Irrigation #5 (Milking/Dough stage)",
            hi="सिंचाई #5 (दूधिया/आटा अवस्था)",
            bn="সেচ #5 (দুধ/আটা পর্যায়)",
        ),
        "Basal dose (FYM/compost + recommended NPK)": LocalizedText(
            en="Basal dose (FYM/compost + recommended NPK)",
            hi="आधार खुराक (गोबर खाद/कम्पोस्ट + अनुशंसित NPK)",
            bn="বেসাল ডোজ (গোবর সার/কম্পোস্ট + প্রস্তাবিত NPK)",
        ),
        "Top dress nitrogen (after first irrigation / CRI)": LocalizedText(
            en="Top dress nitrogen (after first irrigation / CRI)",
            hi="नाइट्रोजन की टॉप ड्रेसिंग (पहली सिंचाई/CRI के बाद)",
            bn="নাইট্রোজেন টপ ড্রেসিং (প্রথম সেচ/CRI পরে)",
        ),
        "Rust/leaf blight monitoring and preventive spray decision": LocalizedText(
            en="Rust/leaf blight monitoring and preventive spray decision",
            hi="रस्ट/पत्ती झुलसा की निगरानी और निवारक स्प्रे का निर्णय",
            bn="মরিচা/পাতা ঝলসা পর্যবেক্ষণ এবং প্রতিরোধমূলক স্প্রে সিদ্ধান্ত",
        ),

        # Generic/Vegetable specific
        "Basal nutrition (FYM/compost + recommended NPK)": LocalizedText(
            en="Basal nutrition (FYM/compost + recommended NPK)",
            hi="आधार पोषण (गोबर खाद/कम्पोस्ट + अनुशंसित NPK)",
            bn="বেসাল পুষ্টি (গোবর সার/কম্পোস্ট + প্রস্তাবিত NPK)",
        ),
        "Top dressing (nitrogen) + micronutrient check": LocalizedText(
            en="Top dressing (nitrogen) + micronutrient check",
            hi="टॉप ड्रेसिंग (नाइट्रोजन) + सूक्ष्म पोषक तत्व जांच",
            bn="টপ ড্রেসিং (নাইট্রোজেন) + মাইক্রোনিউট্রিয়েন্ট পরীক্ষা",
        ),
        "Install sticky/pheromone traps (monitoring)": LocalizedText(
            en="Install sticky/pheromone traps (monitoring)",
            hi="चिपचिपा/फेरोमोन ट्रैप लगाएं (निगरानी)",
            bn="আঠালো/ফেরোমন ট্র্যাপ লাগান (পর্যবেক্ষণ)",
        ),
        "Preventive fungal risk check (humidity/leaf wetness)": LocalizedText(
            en="Preventive fungal risk check (humidity/leaf wetness)",
            hi="फफूंद जोखिम की निवारक जांच (नमी/पत्ती गीलापन)",
            bn="প্রতিরোধমূলক ছত্রাক ঝুঁকি পরীক্ষা (আর্দ্রতা/পাতা ভেজা)",
        ),
    }
)

NOTES_PHRASES = MappingProxyType(
    {
        # Common notes
        "Walk the plot early morning; check undersides of leaves, new growth, and waterlogging. Act only if thresholds are met.": LocalizedText(
            en="Walk the plot early morning; check undersides of leaves, new growth, and waterlogging. Act only if thresholds are met.",
            hi="सुबह जल्दी खेत का चक्कर लगाएं; पत्तियों के नीचे, नई वृद्धि और जलभराव की जांच करें। केवल सीमा पार होने पर ही कार्रवाई करें।",
            bn="সকালে মাঠে হাঁটুন; পাতার নিচে, নতুন বৃদ্ধি এবং জলাবদ্ধতা পরীক্ষা করুন। সীমা অতিক্রম করলেই পদক্ষেপ নিন।",
        ),
        "Prevent root rot and nutrient loss; keep bunds/field channels clear.": LocalizedText(
            en="Prevent root rot and nutrient loss; keep bunds/field channels clear.",
            hi="जड़ सड़न और पोषक तत्व हानि रोकें; मेड़/खेत की नालियां साफ रखें।",
            bn="শিকড় পচা এবং পুষ্টি ক্ষতি রোধ করুন; আল/মাঠের চ্যানেল পরিষ্কার রাখুন।",
        ),
        "Harvest at physiological maturity; avoid harvesting immediately after rain. Dry/grade produce for better price.": LocalizedText(
            en="Harvest at physiological maturity; avoid harvesting immediately after rain. Dry/grade produce for better price.",
            hi="शारीरिक परिपक्वता पर फसल काटें; बारिश के तुरंत बाद कटाई से बचें। बेहतर मूल्य के लिए उपज सुखाएं/ग्रेड करें।",
            bn="শারীরিক পরিপক্কতায় ফসল কাটুন; বৃষ্টির পরপরই কাটা এড়িয়ে চলুন। ভালো দামের জন্য ফসল শুকান/গ্রেড করুন।",
        ),

        # Rice/Paddy watering notes
        "Maintain shallow water layer (2–3 cm) after establishment; skip if continuous rainfall and waterlogging risk.": LocalizedText(
            en="Maintain shallow water layer (2–3 cm) after establishment; skip if continuous rainfall and waterlogging risk.",
            hi="स्थापना के बाद उथला पानी (2-3 सेमी) बनाए रखें; लगातार बारिश और जलभराव के खतरे में छोड़ें।",
            bn="স্থাপনের পরে অগভীর জল স্তর (2-3 সেমি) বজায় রাখুন; ক্রমাগত বৃষ্টি এবং জলাবদ্ধতার ঝুঁকিতে এড়িয়ে যান।",
        ),
        "Irrigate to keep soil moist; avoid long dry gaps during tillering and panicle initiation.": LocalizedText(
            en="Irrigate to keep soil moist; avoid long dry gaps during tillering and panicle initiation.",
            hi="मिट्टी नम रखने के लिए सिंचाई करें; कल्ले निकलने और बाली शुरू होने के दौरान लंबे सूखे अंतराल से बचें।",
            bn="মাটি আর্দ্র রাখতে সেচ দিন; কুশি এবং শীষ উদ্গমনের সময় দীর্ঘ শুষ্ক ব্যবধান এড়িয়ে চলুন।",
        ),
        "Stop irrigation ~10–14 days before harvest to improve grain maturity and ease harvesting.": LocalizedText(
            en="Stop irrigation ~10–14 days before harvest to improve grain maturity and ease harvesting.",
            hi="फसल कटाई से ~10-14 दिन पहले सिंचाई बंद करें ताकि दाने की परिपक्वता बेहतर हो और कटाई आसान हो।",
            bn="ফসল কাটার ~10-14 দিন আগে সেচ বন্ধ করুন যাতে দানা পরিপক্বতা ভালো হয় এবং কাটা সহজ হয়।",
        ),

        # Rice fertilizer notes
        "Apply well-decomposed FYM/compost. Use soil-test based NPK; consider zinc sulfate in zinc-deficient areas.": LocalizedText(
            en="Apply well-decomposed FYM/compost. Use soil-test based NPK; consider zinc sulfate in zinc-deficient areas.",
            hi="अच्छी तरह सड़ी गोबर खाद/कम्पोस्ट डालें। मृदा परीक्षण आधारित NPK का उपयोग करें; जिंक की कमी वाले क्षेत्रों में जिंक सल्फेट पर विचार करें।",
            bn="ভালোভাবে পচা গোবর সার/কম্পোস্ট দিন। মাটি পরীক্ষা ভিত্তিক NPK ব্যবহার করুন; জিঙ্ক-ঘাটতি এলাকায় জিঙ্ক সালফেট বিবেচনা করুন।",
        ),
        "Split N improves uptake; apply just before irrigation or rainfall.": LocalizedText(
            en="Split N improves uptake; apply just before irrigation or rainfall.",
            hi="विभाजित N अवशोषण बेहतर करता है; सिंचाई या बारिश से ठीक पहले डालें।",
            bn="বিভক্ত N শোষণ উন্নত করে; সেচ বা বৃষ্টির ঠিক আগে দিন।",
        ),
        "Critical for grain formation; avoid over-N in cloudy/humid conditions.": LocalizedText(
            en="Critical for grain formation; avoid over-N in cloudy/humid conditions.",
            hi="दाना बनने के लिए महत्वपूर्ण; बादल/आर्द्र स्थितियों में अधिक N से बचें।",
            bn="দানা গঠনের জন্য গুরুত্বপূর্ণ; মেঘলা/আর্দ্র অবস্থায় অতিরিক্ত N এড়িয়ে চলুন।",
        ),
        "Use traps for monitoring; spray only if infestation crosses thresholds.": LocalizedText(
            en="Use traps for monitoring; spray only if infestation crosses thresholds.",
            hi="निगरानी के लिए ट्रैप का उपयोग करें; केवल संक्रमण सीमा पार करने पर ही स्प्रे करें।",
            bn="পর্যবেক্ষণের জন্য ট্র্যাপ ব্যবহার করুন; সংক্রমণ সীমা অতিক্রম করলেই স্প্রে করুন।",
        ),

        # Wheat irrigation notes
        "Most critical irrigation for wheat. If rainfall occurred recently and soil is moist, adjust accordingly.": LocalizedText(
            en="Most critical irrigation for wheat. If rainfall occurred recently and soil is moist, adjust accordingly.",
            hi="गेहूं के लिए सबसे महत्वपूर्ण सिंचाई। यदि हाल ही में बारिश हुई और मिट्टी नम है, तो तदनुसार समायोजित करें।",
            bn="গমের জন্য সবচেয়ে গুরুত্বপূর্ণ সেচ। সম্প্রতি বৃষ্টি হলে এবং মাটি আর্দ্র থাকলে সেই অনুযায়ী সামঞ্জস্য করুন।",
        ),
        "Avoid water stress; do not over-irrigate in cold foggy spells.": LocalizedText(
            en="Avoid water stress; do not over-irrigate in cold foggy spells.",
            hi="पानी की कमी से बचें; ठंडे कोहरे में अधिक सिंचाई न करें।",
            bn="জলের চাপ এড়িয়ে চলুন; ঠান্ডা কুয়াশায় অতিরিক্ত সেচ দেবেন না।",
        ),
        "Supports spike development; ensure good drainage after irrigation.": LocalizedText(
            en="Supports spike development; ensure good drainage after irrigation.",
            hi="बाली विकास में सहायक; सिंचाई के बाद अच्छी जल निकासी सुनिश्चित करें।",
            bn="শীষ বিকাশে সহায়ক; সেচের পরে ভালো নিষ্কাশন নিশ্চিত করুন।",
        ),
        "Avoid stress; irrigate in morning hours when possible.": LocalizedText(
            en="Avoid stress; irrigate in morning hours when possible.",
            hi="तनाव से बचें; संभव हो तो सुबह के समय सिंचाई करें।",
            bn="চাপ এড়িয়ে চলুন; সম্ভব হলে সকালে সেচ দিন।",
        ),
        "Last critical irrigation; stop irrigation 10–12 days before harvest.": LocalizedText(
            en="Last critical irrigation; stop irrigation 10–12 days before harvest.",
            hi="आखिरी महत्वपूर्ण सिंचाई; फसल कटाई से 10-12 दिन पहले सिंचाई बंद करें।",
            bn="শেষ গুরুত্বপূর্ণ সেচ; ফসল কাটার 10-12 দিন আগে সেচ বন্ধ করুন।",
        ),
        "Use soil-test based recommendations; place fertilizer below seed zone where applicable.": LocalizedText(
            en="Use soil-test based recommendations; place fertilizer below seed zone where applicable.",
            hi="मृदा परीक्षण आधारित सिफारिशें उपयोग करें; जहां लागू हो बीज क्षेत्र के नीचे उर्वरक रखें।",
            bn="মাটি পরীক্ষা ভিত্তিক সুপারিশ ব্যবহার করুন; যেখানে প্রযোজ্য বীজ অঞ্চলের নিচে সার রাখুন।",
        ),
        "Split N reduces lodging risk and improves grain filling.": LocalizedText(
            en="Split N reduces lodging risk and improves grain filling.",
            hi="विभाजित N गिरने का खतरा कम करता है और दाना भरने में सुधार करता है।",
            bn="বিভক্ত N হেলে পড়ার ঝুঁকি কমায় এবং দানা ভরাট উন্নত করে।",
        ),
        "In humid/foggy weather, rust risk rises. Use resistant varieties and spray only if symptoms appear.": LocalizedText(
            en="In humid/foggy weather, rust risk rises. Use resistant varieties and spray only if symptoms appear.",
            hi="आर्द्र/कोहरे वाले मौसम में रस्ट का खतरा बढ़ जाता है। प्रतिरोधी किस्में उपयोग करें और लक्षण दिखने पर ही स्प्रे करें।",
            bn="আর্দ্র/কুয়াশা আবহাওয়ায় মরিচার ঝুঁকি বাড়ে। প্রতিরোধী জাত ব্যবহার করুন এবং লক্ষণ দেখা দিলেই স্প্রে করুন।",
        ),

        # Generic/Vegetable notes
        "Keep soil consistently moist for establishment; avoid waterlogging. Mulch helps in hot weather.": LocalizedText(
            en="Keep soil consistently moist for establishment; avoid waterlogging. Mulch helps in hot weather.",
            hi="स्थापना के लिए मिट्टी को लगातार नम रखें; जलभराव से बचें। गर्म मौसम में मल्च मदद करता है।",
            bn="স্থাপনের জন্য মাটি ক্রমাগত আর্দ্র রাখুন; জলাবদ্ধতা এড়িয়ে চলুন। গরম আবহাওয়ায় মালচ সাহায্য করে।",
        ),
        "Irrigate during dry spells; skip after good rainfall. Ensure drainage to prevent fungal diseases.": LocalizedText(
            en="Irrigate during dry spells; skip after good rainfall. Ensure drainage to prevent fungal diseases.",
            hi="शुष्क अवधि में सिंचाई करें; अच्छी बारिश के बाद छोड़ें। फफूंद रोग रोकने के लिए जल निकासी सुनिश्चित करें।",
            bn="শুষ্ক সময়ে সেচ দিন; ভালো বৃষ্টির পরে এড়িয়ে যান। ছত্রাক রোগ প্রতিরোধে নিষ্কাশন নিশ্চিত করুন।",
        ),
        "Irrigate every 2 days (adjust for soil type); avoid wetting foliage late evening.": LocalizedText(
            en="Irrigate every 2 days (adjust for soil type); avoid wetting foliage late evening.",
            hi="हर 2 दिन सिंचाई करें (मिट्टी के प्रकार के अनुसार समायोजित करें); शाम को पत्तियों को गीला करने से बचें।",
            bn="প্রতি 2 দিন সেচ দিন (মাটির ধরন অনুযায়ী সামঞ্জস্য করুন); সন্ধ্যায় পাতা ভেজানো এড়িয়ে চলুন।",
        ),
        "Reduce irrigation close to harvest to improve quality and reduce post-harvest rot.": LocalizedText(
            en="Reduce irrigation close to harvest to improve quality and reduce post-harvest rot.",
            hi="गुणवत्ता सुधारने और फसल के बाद सड़न कम करने के लिए कटाई के करीब सिंचाई कम करें।",
            bn="গুণমান উন্নত করতে এবং ফসল কাটার পরে পচা কমাতে কাটার কাছাকাছি সেচ কমান।",
        ),
        "Incorporate compost and basal P & K. Use soil test when available. Apply biofertilizers if using organic methods.": LocalizedText(
            en="Incorporate compost and basal P & K. Use soil test when available. Apply biofertilizers if using organic methods.",
            hi="कम्पोस्ट और आधार P & K मिलाएं। उपलब्ध होने पर मृदा परीक्षण का उपयोग करें। जैविक विधियों में जैव उर्वरक लगाएं।",
            bn="কম্পোস্ট এবং বেসাল P & K মেশান। উপলব্ধ হলে মাটি পরীক্ষা ব্যবহার করুন। জৈব পদ্ধতিতে জৈব সার প্রয়োগ করুন।",
        ),
        "Split nitrogen improves uptake. If leaf yellowing/poor growth, consider micronutrients (Zn/B) as per symptoms.": LocalizedText(
            en="Split nitrogen improves uptake. If leaf yellowing/poor growth, consider micronutrients (Zn/B) as per symptoms.",
            hi="विभाजित नाइट्रोजन अवशोषण सुधारता है। पत्ती पीली/खराब वृद्धि पर लक्षणों के अनुसार सूक्ष्म पोषक (Zn/B) पर विचार करें।",
            bn="বিভক্ত নাইট্রোজেন শোষণ উন্নত করে। পাতা হলুদ/দুর্বল বৃদ্ধিতে লক্ষণ অনুযায়ী মাইক্রোনিউট্রিয়েন্ট (Zn/B) বিবেচনা করুন।",
        ),
        "Use traps for monitoring; keep field clean to reduce pest carryover.": LocalizedText(
            en="Use traps for monitoring; keep field clean to reduce pest carryover.",
            hi="निगरानी के लिए ट्रैप का उपयोग करें; कीट वहन कम करने के लिए खेत साफ रखें।",
            bn="পর্যবেক্ষণের জন্য ট্র্যাপ ব্যবহার করুন; পোকা বহন কমাতে মাঠ পরিষ্কার রাখুন।",
        ),
        "Avoid overhead irrigation at night; ensure airflow. Use recommended protectant fungicide only if risk is high.": LocalizedText(
            en="Avoid overhead irrigation at night; ensure airflow. Use recommended protectant fungicide only if risk is high.",
            hi="रात में ऊपरी सिंचाई से बचें; वायु प्रवाह सुनिश्चित करें। उच्च जोखिम पर ही अनुशंसित रक्षक फफूंदनाशक उपयोग करें।",
            bn="রাতে ওভারহেড সেচ এড়িয়ে চলুন; বায়ুপ্রবাহ নিশ্চিত করুন। উচ্চ ঝুঁকিতেই প্রস্তাবিত প্রতিরক্ষামূলক ছত্রাকনাশক ব্যবহার করুন।",
        ),
    }
)


def heuristic_title_i18n(text: str) -> LocalizedText:
    return TITLE_PHRASES.get(text) or LocalizedText(en=text, hi=text, bn=text)


def heuristic_notes_i18n(text: str) -> LocalizedText:
    return NOTES_PHRASES.get(text) or LocalizedText(en=text, hi=text, bn=text)


def plan_title_i18n(crop_name: str) -> LocalizedText:
    return LocalizedText(
        en=f"{crop_name} Farming Plan",
        hi=f"{crop_name} खेती योजना",
        bn=f"{crop_name} চাষ পরিকল্পনা",
    )


def plan_overview_i18n(crop_name: str, planting_iso: str, harvest_iso: str) -> LocalizedText:
    return LocalizedText(
        en=(
            f"Complete farming schedule for {crop_name} from planting ({planting_iso}) "
            f"to harvest ({harvest_iso}). Follow the daily tasks for best results."
        ),
        hi=(
            f"{crop_name} के लिए संपूर्ण खेती कार्यक्रम, बुवाई ({planting_iso}) से कटाई "
            f"({harvest_iso}) तक। सर्वोत्तम परिणामों के लिए दैनिक कार्यों का पालन करें।"
        ),
        bn=(
            f"{crop_name}-এর জন্য সম্পূর্ণ চাষ সময়সূচি, রোপণ ({planting_iso}) থেকে ফসল কাটা "
            f"({harvest_iso}) পর্যন্ত। সেরা ফলাফলের জন্য দৈনিক কাজগুলি অনুসরণ করুন।"
        ),
    )
