"""
Reference tables for the farm calculators

Seed rates follow ICAR recommendations (kg/acre, 2024 market prices).
Fertilizer quantities are in 50 kg bags per acre.
"""

SEED_RATES = {
    "Wheat": {"rate": 45, "range": "40-50", "price": 55, "unit": "kg", "name_hi": "गेहूं", "spacing": "Row spacing 20-22.5 cm"},
    "Rice": {"rate": 25, "range": "20-30", "price": 65, "unit": "kg", "name_hi": "धान", "spacing": "Transplanting: 20×15 cm"},
    "Cotton": {"rate": 2.5, "range": "2-3", "price": 1500, "unit": "kg", "name_hi": "कपास", "spacing": "60×45 cm spacing"},
    "Soybean": {"rate": 30, "range": "25-35", "price": 90, "unit": "kg", "name_hi": "सोयाबीन", "spacing": "45×5 cm spacing"},
    "Sugarcane": {"rate": 2500, "range": "2000-3000", "price": 4, "unit": "setts", "name_hi": "गन्ना", "spacing": "3-bud setts, 90 cm rows"},
    "Maize": {"rate": 8, "range": "7-10", "price": 350, "unit": "kg", "name_hi": "मक्का", "spacing": "60×20 cm spacing"},
    "Groundnut": {"rate": 50, "range": "45-55", "price": 120, "unit": "kg", "name_hi": "मूंगफली", "spacing": "30×10 cm spacing"},
    "Mustard": {"rate": 2, "range": "1.5-2.5", "price": 250, "unit": "kg", "name_hi": "सरसों", "spacing": "30×10 cm spacing"},
    "Chilli": {"rate": 0.25, "range": "0.2-0.3", "price": 9000, "unit": "kg", "name_hi": "मिर्च", "spacing": "60×45 cm (transplant)"},
    "Tomato": {"rate": 0.2, "range": "0.15-0.25", "price": 18000, "unit": "kg", "name_hi": "टमाटर", "spacing": "60×45 cm (transplant)"},
}
DEFAULT_SEED_RATE = {"rate": 20, "range": "15-25", "price": 100, "unit": "kg", "name_hi": "फसल", "spacing": "Standard"}

FERTILIZER_BAGS = {
    "Wheat": {"urea": 2.5, "dap": 1, "mop": 0.5, "name_hi": "गेहूं", "when": "DAP बुवाई पर, यूरिया 3 बार में"},
    "Rice": {"urea": 2.5, "dap": 1, "mop": 1, "name_hi": "धान", "when": "DAP रोपाई पर, यूरिया 3 बार में"},
    "Cotton": {"urea": 3, "dap": 1.5, "mop": 1, "name_hi": "कपास", "when": "DAP बुवाई पर, यूरिया 3 बार में"},
    "Soybean": {"urea": 0.5, "dap": 1.5, "mop": 0.5, "name_hi": "सोयाबीन", "when": "सब बुवाई पर"},
    "Sugarcane": {"urea": 6, "dap": 2.5, "mop": 2, "name_hi": "गन्ना", "when": "DAP बुवाई पर, यूरिया 3 बार में"},
    "Maize": {"urea": 2.5, "dap": 1, "mop": 0.5, "name_hi": "मक्का", "when": "DAP बुवाई पर, यूरिया 2 बार में"},
    "Groundnut": {"urea": 0.5, "dap": 1, "mop": 0.5, "name_hi": "मूंगफली", "when": "सब बुवाई पर + जिप्सम फूल पर"},
    "Mustard": {"urea": 1.5, "dap": 0.75, "mop": 0, "name_hi": "सरसों", "when": "DAP बुवाई पर, यूरिया 2 बार में"},
}
DEFAULT_FERTILIZER_BAGS = {"urea": 2, "dap": 1, "mop": 0.5, "name_hi": "फसल", "when": "DAP बुवाई पर"}

# ₹ per bag
FERTILIZER_BAG_PRICES = {"urea": 267, "dap": 1350, "mop": 900}

# Heavy soils hold nutrients, sandy soils leach them
FERTILIZER_SOIL_MULTIPLIERS = {"Black": 0.85, "Clay": 0.85, "Sandy": 1.15}

# Litres per acre per irrigation
IRRIGATION_WATER = {
    "Wheat": {"water": 40000, "frequency": "Every 15-20 days", "frequency_hi": "हर 15-20 दिन", "name_hi": "गेहूं"},
    "Rice": {"water": 100000, "frequency": "Standing water 5cm", "frequency_hi": "5cm पानी खड़ा रखें", "name_hi": "धान"},
    "Cotton": {"water": 50000, "frequency": "Every 12-15 days", "frequency_hi": "हर 12-15 दिन", "name_hi": "कपास"},
    "Soybean": {"water": 35000, "frequency": "Every 15 days", "frequency_hi": "हर 15 दिन", "name_hi": "सोयाबीन"},
    "Sugarcane": {"water": 80000, "frequency": "Every 7-10 days", "frequency_hi": "हर 7-10 दिन", "name_hi": "गन्ना"},
    "Maize": {"water": 45000, "frequency": "Every 10-15 days", "frequency_hi": "हर 10-15 दिन", "name_hi": "मक्का"},
    "Groundnut": {"water": 30000, "frequency": "Every 12-15 days", "frequency_hi": "हर 12-15 दिन", "name_hi": "मूंगफली"},
    "Vegetables": {"water": 35000, "frequency": "Every 5-7 days", "frequency_hi": "हर 5-7 दिन", "name_hi": "सब्जियां"},
}
DEFAULT_IRRIGATION_WATER = {
    "water": 40000,
    "frequency": "Every 10-15 days",
    "frequency_hi": "हर 10-15 दिन",
    "name_hi": "फसल",
}
IRRIGATION_SOIL_MULTIPLIERS = {"Sandy": 1.3, "Clay": 0.8}
IRRIGATIONS_PER_SEASON = 6

# ₹ per hour
MACHINE_RENTAL = {
    "Tractor": {"rental": 800, "name_hi": "ट्रैक्टर"},
    "Harvester": {"rental": 2000, "name_hi": "हार्वेस्टर"},
    "Rotavator": {"rental": 1200, "name_hi": "रोटावेटर"},
    "Thresher": {"rental": 600, "name_hi": "थ्रेशर"},
    "Pump Set": {"rental": 100, "name_hi": "पंप सेट"},
    "Sprayer": {"rental": 200, "name_hi": "स्प्रेयर"},
}
DEFAULT_MACHINE_RENTAL = {"rental": 800, "name_hi": "मशीन"}

PESTICIDE_RUPEES_PER_ML = 5

# Market average daily wage upper bound, ₹
LABOUR_AVERAGE_RATE_CEILING = 400

# Storage cost per quintal above which selling early is advised, ₹
STORAGE_COST_ALERT_PER_QUINTAL = 100
