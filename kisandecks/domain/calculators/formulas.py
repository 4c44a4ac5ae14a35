"""
Farm calculators

Each function takes already-parsed numbers and returns the result figures,
the step-by-step breakdown and Hindi tips. Money is rounded to whole rupees.
"""

import math
from typing import Optional

from .formatting import fixed, format_grouped, format_number, round_half_up, rupees
from .schemas import CalculationResult, Step, Tips
from .tables import (
    DEFAULT_FERTILIZER_BAGS,
    DEFAULT_IRRIGATION_WATER,
    DEFAULT_MACHINE_RENTAL,
    DEFAULT_SEED_RATE,
    FERTILIZER_BAG_PRICES,
    FERTILIZER_BAGS,
    FERTILIZER_SOIL_MULTIPLIERS,
    IRRIGATION_SOIL_MULTIPLIERS,
    IRRIGATION_WATER,
    IRRIGATIONS_PER_SEASON,
    LABOUR_AVERAGE_RATE_CEILING,
    MACHINE_RENTAL,
    PESTICIDE_RUPEES_PER_ML,
    SEED_RATES,
    STORAGE_COST_ALERT_PER_QUINTAL,
)


def _percent(part: float, whole: float) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


def crop_cost(
    crop: Optional[str],
    land: float,
    seed: float,
    fertilizer: float,
    pesticide: float,
    labour: float,
    irrigation: float,
    other: float,
) -> CalculationResult:
    total = seed + fertilizer + pesticide + labour + irrigation + other
    total_rounded = round_half_up(total)
    cost_per_acre = round_half_up(total / land)

    shares = {
        "seed": _percent(seed, total),
        "fertilizer": _percent(fertilizer, total),
        "pesticide": _percent(pesticide, total),
        "labour": _percent(labour, total),
        "irrigation": _percent(irrigation, total),
        "other": _percent(other, total),
    }

    # Ties keep the earlier category
    categories = [
        ("बीज", seed, shares["seed"]),
        ("खाद", fertilizer, shares["fertilizer"]),
        ("कीटनाशक", pesticide, shares["pesticide"]),
        ("मजदूरी", labour, shares["labour"]),
        ("सिंचाई", irrigation, shares["irrigation"]),
    ]
    highest = categories[0]
    for category in categories[1:]:
        if category[1] > highest[1]:
            highest = category

    land_text = format_number(land)
    breakdown = [
        Step(step=f"Step 1: Land Size = {land_text} acre", stepHindi=f"चरण 1: जमीन = {land_text} एकड़", value=f"{land_text} एकड़"),
        Step(
            step=f"Step 2: Seed Cost = {rupees(seed)} ({shares['seed']}%)",
            stepHindi=f"चरण 2: बीज खर्च = {rupees(seed)} ({shares['seed']}%)",
            value=rupees(seed),
        ),
        Step(
            step=f"Step 3: Fertilizer = {rupees(fertilizer)} ({shares['fertilizer']}%)",
            stepHindi=f"चरण 3: खाद खर्च = {rupees(fertilizer)} ({shares['fertilizer']}%)",
            value=rupees(fertilizer),
        ),
        Step(
            step=f"Step 4: Pesticide = {rupees(pesticide)} ({shares['pesticide']}%)",
            stepHindi=f"चरण 4: कीटनाशक = {rupees(pesticide)} ({shares['pesticide']}%)",
            value=rupees(pesticide),
        ),
        Step(
            step=f"Step 5: Labour = {rupees(labour)} ({shares['labour']}%)",
            stepHindi=f"चरण 5: मजदूरी = {rupees(labour)} ({shares['labour']}%)",
            value=rupees(labour),
        ),
        Step(
            step=f"Step 6: Irrigation = {rupees(irrigation)} ({shares['irrigation']}%)",
            stepHindi=f"चरण 6: सिंचाई = {rupees(irrigation)} ({shares['irrigation']}%)",
            value=rupees(irrigation),
        ),
        Step(
            step=f"Step 7: Other = {rupees(other)} ({shares['other']}%)",
            stepHindi=f"चरण 7: अन्य खर्च = {rupees(other)} ({shares['other']}%)",
            value=rupees(other),
        ),
        Step(step="Step 8: Total = Sum of all costs", stepHindi="चरण 8: कुल = सभी खर्च जोड़कर", value=rupees(total_rounded)),
        Step(
            step=f"Step 9: Per Acre = {rupees(total_rounded)} ÷ {land_text}",
            stepHindi=f"चरण 9: प्रति एकड़ = {rupees(total_rounded)} ÷ {land_text}",
            value=f"{rupees(cost_per_acre)}/एकड़",
        ),
    ]

    tips = Tips(
        action=(
            f"{crop or 'आपकी फसल'} की कुल लागत {rupees(total_rounded)} ({rupees(cost_per_acre)}/एकड़) है। "
            f"सबसे ज्यादा खर्च: {highest[0]} ({highest[2]}%)।"
        ),
        saving=(
            "बचत के सुझाव: Organic manure से fertilizer cost 20-30% कम हो सकती है। "
            "Drip irrigation से पानी 50% और बिजली 30% बचती है। "
            "FPO/Group में pesticide खरीदें - 15-20% discount मिलता है।"
        ),
        safety=(
            "सभी bills और receipts रखें। KCC loan पर 4% interest subsidy के लिए eligible हैं। "
            "PM-KISAN से ₹6,000/year भी मिलता है।"
        ),
    )

    return CalculationResult(
        result={
            "totalCost": total_rounded,
            "costPerAcre": cost_per_acre,
            "seedCost": round_half_up(seed),
            "fertilizerCost": round_half_up(fertilizer),
            "labourCost": round_half_up(labour),
        },
        breakdown=breakdown,
        tips=tips,
    )


def profit(crop: Optional[str], yield_qty: float, rate: float, cost: float) -> CalculationResult:
    revenue = yield_qty * rate
    net_profit = revenue - cost
    margin = round_half_up(net_profit / revenue * 100) if revenue > 0 else 0
    roi = round_half_up(net_profit / cost * 100) if cost > 0 else 0
    break_even = round_half_up(cost / yield_qty) if yield_qty > 0 else 0

    revenue_rounded = round_half_up(revenue)
    net_rounded = round_half_up(net_profit)
    yield_text = format_number(yield_qty)

    breakdown = [
        Step(
            step=f"Step 1: Expected Yield = {yield_text} quintal",
            stepHindi=f"चरण 1: अनुमानित उपज = {yield_text} क्विंटल",
            value=f"{yield_text} क्विंटल",
        ),
        Step(
            step=f"Step 2: Selling Rate = {rupees(rate)}/quintal",
            stepHindi=f"चरण 2: बिक्री दर = {rupees(rate)}/क्विंटल",
            value=f"{rupees(rate)}/क्विंटल",
        ),
        Step(
            step=f"Step 3: Total Revenue = Yield × Rate = {yield_text} × {rupees(rate)}",
            stepHindi=f"चरण 3: कुल बिक्री = उपज × दर = {yield_text} × {rupees(rate)}",
            value=rupees(revenue_rounded),
        ),
        Step(step="Step 4: Total Cost (all expenses)", stepHindi="चरण 4: कुल लागत (सभी खर्च)", value=rupees(cost)),
        Step(
            step=f"Step 5: Net Profit = Revenue - Cost = {rupees(revenue_rounded)} - {rupees(cost)}",
            stepHindi=f"चरण 5: शुद्ध मुनाफा = बिक्री - लागत = {rupees(revenue_rounded)} - {rupees(cost)}",
            value=rupees(net_rounded),
        ),
        Step(
            step=f"Step 6: ROI = (Profit ÷ Cost) × 100 = {roi}%",
            stepHindi=f"चरण 6: ROI = (मुनाफा ÷ लागत) × 100 = {roi}%",
            value=f"{roi}% return",
        ),
        Step(
            step=f"Step 7: Break-even Rate = Cost ÷ Yield = ₹{break_even}/quintal",
            stepHindi=f"चरण 7: न-फायदा न-नुकसान दर = लागत ÷ उपज = ₹{break_even}/क्विंटल",
            value=f"₹{break_even}/क्विंटल",
        ),
    ]

    if net_profit >= 0:
        tips = Tips(
            action=(
                f"बढ़िया! {rupees(net_rounded)} का मुनाफा होगा। ROI: {roi}% "
                f"(हर ₹100 खर्च पर ₹{100 + roi} वापस)। Profit Margin: {margin}%"
            ),
            saving=(
                "अगर storage facility है तो 2-4 हफ्ते रुकें - भाव 5-15% और बढ़ सकता है। "
                "Warehouse receipt से loan भी मिल सकता है।"
            ),
            safety=(
                "MSP (Minimum Support Price) पर बेचने के लिए नजदीकी मंडी में registration करें। "
                "e-NAM portal पर भी check करें।"
            ),
        )
    else:
        tips = Tips(
            action=(
                f"⚠️ {rupees(abs(net_rounded))} का नुकसान हो सकता है। Break-even के लिए कम से कम "
                f"₹{break_even}/क्विंटल मिलना चाहिए (आपका rate ₹{format_number(rate)} है)।"
            ),
            saving=(
                "लागत कम करने के options देखें: drip irrigation, organic fertilizers, group buying। "
                f"या better market rate (₹{break_even}+ /quintal) का इंतजार करें।"
            ),
            safety=(
                "अगली बार बुवाई से पहले market trends और MSP rates जरूर check करें। "
                "Crop insurance (PM Fasal Bima) लेना फायदेमंद है।"
            ),
        )

    return CalculationResult(
        result={
            "netProfit": net_rounded,
            "totalRevenue": revenue_rounded,
            "profitPercentage": f"{roi}%",
            "breakEvenRate": break_even,
        },
        breakdown=breakdown,
        tips=tips,
    )


def loan_emi(principal: float, annual_rate: float, months: float) -> CalculationResult:
    """EMI = P × r × (1+r)^n ÷ ((1+r)^n - 1), or P ÷ n without interest"""
    monthly_rate = annual_rate / 12 / 100
    emi = principal / months
    if monthly_rate > 0:
        try:
            growth = math.pow(1 + monthly_rate, months)
        except OverflowError:
            # (1+r)^n too large to represent; the EMI has converged to P × r
            emi = principal * monthly_rate
        else:
            if growth != 1:
                emi = principal * monthly_rate * growth / (growth - 1)

    total_payment = emi * months
    total_interest = total_payment - principal
    monthly_rate_text = fixed(annual_rate / 12, 3)

    emi_rounded = round_half_up(emi)
    payment_rounded = round_half_up(total_payment)
    interest_rounded = round_half_up(total_interest)
    rate_text = format_number(annual_rate)
    months_text = format_number(months)

    breakdown = [
        Step(
            step=f"Step 1: Principal (P) = {rupees(principal)}",
            stepHindi=f"चरण 1: मूलधन (P) = {rupees(principal)}",
            value=rupees(principal),
        ),
        Step(
            step=f"Step 2: Annual rate {rate_text}% → Monthly rate (r) = {rate_text}% ÷ 12 = {monthly_rate_text}%",
            stepHindi=f"चरण 2: सालाना दर {rate_text}% → मासिक दर (r) = {rate_text}% ÷ 12 = {monthly_rate_text}%",
            value=f"{monthly_rate_text}%/माह",
        ),
        Step(
            step=f"Step 3: Number of months (n) = {months_text}",
            stepHindi=f"चरण 3: महीनों की संख्या (n) = {months_text}",
            value=f"{months_text} महीने",
        ),
        Step(
            step="Step 4: EMI = P × r × (1+r)^n ÷ ((1+r)^n - 1)",
            stepHindi="चरण 4: EMI = P × r × (1+r)^n ÷ ((1+r)^n - 1)",
            value="फॉर्मूला",
        ),
        Step(step="Step 5: Monthly EMI calculated", stepHindi="चरण 5: मासिक EMI निकाली", value=f"{rupees(emi_rounded)}/माह"),
        Step(
            step=f"Step 6: Total Payment = EMI × {months_text} months",
            stepHindi=f"चरण 6: कुल भुगतान = EMI × {months_text} महीने",
            value=rupees(payment_rounded),
        ),
        Step(
            step="Step 7: Total Interest = Total Payment - Principal",
            stepHindi="चरण 7: कुल ब्याज = कुल भुगतान - मूलधन",
            value=rupees(interest_rounded),
        ),
    ]

    tips = Tips(
        action=(
            f"हर महीने {rupees(emi_rounded)} की EMI भरनी होगी। "
            f"{months_text} महीने में कुल {rupees(payment_rounded)} देने होंगे।"
        ),
        saving=(
            "KCC (Kisan Credit Card) पर 4% interest subsidy मिलती है - bank में पूछें। "
            "अगर possible हो तो part-prepayment करें - ₹10,000 extra देने पर "
            f"~{rupees(round_half_up(total_interest * 0.15))} ब्याज बचेगा।"
        ),
        safety="EMI date याद रखें। Late payment पर penalty (2-3%) और credit score खराब होता है। Auto-debit लगवाएं।",
    )

    return CalculationResult(
        result={"monthlyEMI": emi_rounded, "totalInterest": interest_rounded, "totalPayment": payment_rounded},
        breakdown=breakdown,
        tips=tips,
    )


def seed(crop: Optional[str], area: float) -> CalculationResult:
    data = SEED_RATES.get(crop, DEFAULT_SEED_RATE) if crop else DEFAULT_SEED_RATE
    seed_needed = float(fixed(data["rate"] * area, 2))
    estimated_cost = round_half_up(seed_needed * data["price"])
    unit = "setts (टुकड़े)" if data["unit"] == "setts" else "kg"

    area_text = format_number(area)
    needed_text = format_number(seed_needed)
    rate_text = format_number(data["rate"])

    breakdown = [
        Step(step=f"Step 1: Land area = {area_text} acre", stepHindi=f"चरण 1: जमीन = {area_text} एकड़", value=f"{area_text} एकड़"),
        Step(
            step=f"Step 2: ICAR recommended seed rate for {crop or 'crop'} = {data['range']} {unit}/acre",
            stepHindi=f"चरण 2: {data['name_hi']} के लिए ICAR अनुशंसित दर = {data['range']} {unit}/एकड़",
            value=f"{rate_text} {unit}/एकड़",
        ),
        Step(step=f"Step 3: Spacing: {data['spacing']}", stepHindi=f"चरण 3: दूरी: {data['spacing']}", value=data["spacing"]),
        Step(
            step=f"Step 4: Total seeds = Area × Rate = {area_text} × {rate_text}",
            stepHindi=f"चरण 4: कुल बीज = क्षेत्र × दर = {area_text} × {rate_text}",
            value=f"{needed_text} {unit}",
        ),
        Step(
            step=f"Step 5: Cost = {needed_text} {unit} × ₹{data['price']}/{unit}",
            stepHindi=f"चरण 5: खर्च = {needed_text} {unit} × ₹{data['price']}/{unit}",
            value=rupees(estimated_cost),
        ),
    ]

    tips = Tips(
        action=(
            f"{area_text} एकड़ {data['name_hi']} के लिए {needed_text} {unit} certified बीज खरीदें। "
            f"Market price ~₹{data['price']}/{unit} है।"
        ),
        saving=(
            "Government seed store (State Seed Corporation) से खरीदें - 20-25% subsidy मिलती है। "
            "IFFCO/Krishi Kendra भी अच्छा option है। Packet पर lot number और expiry date जरूर देखें।"
        ),
        safety=(
            "बुवाई से पहले बीज उपचार (Seed Treatment) जरूर करें: Thiram/Carbendazim (2-3 gm/kg बीज) से "
            "treat करें - germination 15-20% बढ़ेगी और रोग कम होंगे।"
        ),
    )

    return CalculationResult(
        result={
            "seedNeeded": f"{needed_text} {unit}",
            "estimatedCost": estimated_cost,
            "ratePerAcre": f"{rate_text} {unit}/acre",
        },
        breakdown=breakdown,
        tips=tips,
    )


def _half_bags(per_acre: float, area: float, soil_multiplier: float):
    """Bags rounded up to the nearest half bag"""
    bags = math.ceil(per_acre * area * soil_multiplier * 2) / 2
    return int(bags) if float(bags).is_integer() else bags


def fertilizer(crop: Optional[str], soil_type: Optional[str], area: float) -> CalculationResult:
    data = FERTILIZER_BAGS.get(crop, DEFAULT_FERTILIZER_BAGS) if crop else DEFAULT_FERTILIZER_BAGS
    soil_multiplier = FERTILIZER_SOIL_MULTIPLIERS.get(soil_type, 1.0) if soil_type else 1.0

    urea_bags = _half_bags(data["urea"], area, soil_multiplier)
    dap_bags = _half_bags(data["dap"], area, soil_multiplier)
    mop_bags = _half_bags(data["mop"], area, soil_multiplier)

    urea_cost = round_half_up(urea_bags * FERTILIZER_BAG_PRICES["urea"])
    dap_cost = round_half_up(dap_bags * FERTILIZER_BAG_PRICES["dap"])
    mop_cost = round_half_up(mop_bags * FERTILIZER_BAG_PRICES["mop"])
    total_cost = urea_cost + dap_cost + mop_cost

    area_text = format_number(area)
    overview = f"जमीन: {area_text} एकड़ | फसल: {data['name_hi']}"
    urea_line = f"यूरिया: {urea_bags} बोरी = {rupees(urea_cost)}"
    dap_line = f"DAP: {dap_bags} बोरी = {rupees(dap_cost)}"
    mop_line = f"MOP: {mop_bags} बोरी = {rupees(mop_cost)}"
    total_line = f"कुल खर्च: {rupees(total_cost)}"

    # Fertilizer steps are shown in Hindi only
    breakdown = [
        Step(step=overview, stepHindi=overview, value=f"{area_text} एकड़"),
        Step(step=urea_line, stepHindi=urea_line, value=rupees(urea_cost)),
        Step(step=dap_line, stepHindi=dap_line, value=rupees(dap_cost)),
        Step(step=mop_line, stepHindi=mop_line, value=rupees(mop_cost)),
        Step(step=total_line, stepHindi=total_line, value=rupees(total_cost)),
    ]

    tips = Tips(
        action=f"खरीदें: यूरिया {urea_bags} + DAP {dap_bags} + MOP {mop_bags} बोरी। {data['when']}",
        saving="यूरिया 2-3 बार में डालें। Government दुकान से खरीदें।",
        safety="मिट्टी जांच करवाएं (₹50-100)। सही खाद = ज्यादा फसल।",
    )

    return CalculationResult(
        result={
            "ureaBags": f"{urea_bags} बोरी",
            "dapBags": f"{dap_bags} बोरी",
            "mopBags": f"{mop_bags} बोरी",
            "estimatedCost": total_cost,
        },
        breakdown=breakdown,
        tips=tips,
    )


def pesticide(pesticide_ml: float, water_litres: float, tank_litres: float) -> CalculationResult:
    per_tank = round_half_up(pesticide_ml / water_litres * tank_litres)
    tanks_needed = math.ceil(water_litres / tank_litres)
    total_cost = round_half_up(pesticide_ml * PESTICIDE_RUPEES_PER_ML)
    cost_per_tank = round_half_up(per_tank * PESTICIDE_RUPEES_PER_ML)
    dilution = round_half_up(water_litres * 1000 / pesticide_ml)

    tank_text = format_number(tank_litres)
    inputs = (
        f"दवाई: {format_number(pesticide_ml)} ml | पानी: {format_number(water_litres)} लीटर | "
        f"टैंक: {tank_text} लीटर"
    )
    per_tank_line = f"प्रति टैंक दवाई: {per_tank} ml"
    tanks_line = f"कुल टैंक: {tanks_needed}"
    cost_per_tank_line = f"प्रति टैंक खर्च: ₹{cost_per_tank}"
    total_line = f"कुल खर्च: {rupees(total_cost)}"

    breakdown = [
        Step(step=inputs, stepHindi=inputs, value="Input"),
        Step(step=per_tank_line, stepHindi=per_tank_line, value=f"{per_tank} ml"),
        Step(step=tanks_line, stepHindi=tanks_line, value=f"{tanks_needed} टैंक"),
        Step(step=cost_per_tank_line, stepHindi=cost_per_tank_line, value=f"₹{cost_per_tank}"),
        Step(step=total_line, stepHindi=total_line, value=rupees(total_cost)),
    ]

    tips = Tips(
        action=f"हर {tank_text}L टैंक में {per_tank} ml दवाई डालें। कुल {tanks_needed} टैंक spray करें।",
        saving="सुबह 6-9 या शाम 4-6 बजे spray करें। हवा की दिशा में spray करें।",
        safety="Mask और दस्ताने पहनें। spray के बाद साबुन से नहाएं। बारिश में spray न करें।",
    )

    return CalculationResult(
        result={
            "pesticidePerTank": f"{per_tank} ml",
            "tanksNeeded": tanks_needed,
            "dilutionRatio": f"1:{dilution}",
            "totalCost": total_cost,
        },
        breakdown=breakdown,
        tips=tips,
    )


def irrigation(crop: Optional[str], soil_type: Optional[str], area: float) -> CalculationResult:
    data = IRRIGATION_WATER.get(crop, DEFAULT_IRRIGATION_WATER) if crop else DEFAULT_IRRIGATION_WATER
    soil_multiplier = IRRIGATION_SOIL_MULTIPLIERS.get(soil_type, 1) if soil_type else 1
    water_needed = round_half_up(data["water"] * area * soil_multiplier)
    season_water = water_needed * IRRIGATIONS_PER_SEASON

    base_text = format_grouped(data["water"])
    needed_text = format_grouped(water_needed)
    area_text = format_number(area)
    multiplier_text = format_number(soil_multiplier)

    breakdown = [
        Step(
            step=f"Base water need for {crop or 'crop'}: {base_text} L/acre/irrigation",
            stepHindi=f"{data['name_hi']} की पानी जरूरत: {base_text} L/एकड़/सिंचाई",
            value=f"{base_text} L",
        ),
        Step(
            step=f"{soil_type or 'Your'} soil adjustment: ×{multiplier_text}",
            stepHindi=f"{soil_type or 'आपकी'} मिट्टी adjustment: ×{multiplier_text}",
            value=f"×{multiplier_text}",
        ),
        Step(
            step=f"For {area_text} acre = {base_text} × {area_text} × {multiplier_text}",
            stepHindi=f"{area_text} एकड़ के लिए = {base_text} × {area_text} × {multiplier_text}",
            value=f"{needed_text} L",
        ),
        Step(step=f"Frequency: {data['frequency']}", stepHindi=f"बारंबारता: {data['frequency_hi']}", value=data["frequency_hi"]),
        Step(
            step=f"Per season ({IRRIGATIONS_PER_SEASON} irrigations): {needed_text} × {IRRIGATIONS_PER_SEASON}",
            stepHindi=f"प्रति सीजन ({IRRIGATIONS_PER_SEASON} सिंचाई): {needed_text} × {IRRIGATIONS_PER_SEASON}",
            value=f"{format_grouped(season_water)} L",
        ),
    ]

    if soil_type == "Sandy":
        safety = "रेतीली मिट्टी में पानी जल्दी उतर जाता है - कम पानी ज्यादा बार दें।"
    else:
        safety = "शाम को पानी देने से fungal disease का खतरा बढ़ता है। सुबह पानी दें।"

    tips = Tips(
        action=(
            f"{data['name_hi']} के लिए {data['frequency_hi']} पानी दें। हर सिंचाई में ~{needed_text} लीटर "
            f"({round_half_up(water_needed / 1000)} हजार लीटर) पानी चाहिए।"
        ),
        saving=(
            "Drip irrigation से 30-50% पानी बचता है। Government subsidy भी मिलती है (50-90%)। "
            "सुबह 6-8 बजे पानी देना best है।"
        ),
        safety=safety,
    )

    return CalculationResult(
        result={
            "waterNeeded": f"{needed_text} लीटर",
            "irrigationFrequency": data["frequency_hi"],
            "annualWater": f"{format_grouped(season_water)} लीटर/सीजन",
        },
        breakdown=breakdown,
        tips=tips,
    )


def machinery(machine_type: Optional[str], hours: float, fuel_rate: float, consumption: float) -> CalculationResult:
    machine = MACHINE_RENTAL.get(machine_type, DEFAULT_MACHINE_RENTAL) if machine_type else DEFAULT_MACHINE_RENTAL
    fuel_needed = hours * consumption
    fuel_cost = fuel_needed * fuel_rate
    rental = machine["rental"] * hours
    total = fuel_cost + rental

    hours_text = format_number(hours)
    fuel_litres = round_half_up(fuel_needed)
    total_rounded = round_half_up(total)

    breakdown = [
        Step(step=f"Working hours: {hours_text}", stepHindi=f"काम के घंटे: {hours_text}", value=f"{hours_text} घंटे"),
        Step(
            step=f"Fuel consumption: {format_number(consumption)} L/hour × {hours_text} hours",
            stepHindi=f"डीजल खपत: {format_number(consumption)} L/घंटा × {hours_text} घंटे",
            value=f"{fuel_litres} L",
        ),
        Step(
            step=f"Fuel cost: {fuel_litres}L × ₹{format_number(fuel_rate)}",
            stepHindi=f"डीजल खर्च: {fuel_litres}L × ₹{format_number(fuel_rate)}",
            value=rupees(round_half_up(fuel_cost)),
        ),
        Step(
            step=f"{machine_type or 'Machine'} rental: ₹{machine['rental']}/hour × {hours_text}",
            stepHindi=f"{machine['name_hi']} किराया: ₹{machine['rental']}/घंटा × {hours_text}",
            value=rupees(round_half_up(rental)),
        ),
        Step(step="Total = Fuel + Rental", stepHindi="कुल = डीजल + किराया", value=rupees(total_rounded)),
    ]

    tips = Tips(
        action=f"{machine['name_hi']} {hours_text} घंटे चलाने पर {rupees(total_rounded)} खर्च आएगा।",
        saving="FPO से किराया लें - 20% सस्ता मिलता है। Machine की regular servicing से 15% diesel बचता है।",
        safety="Peak season (कटाई) में harvester पहले से book करें। Last minute में double rate लगता है।",
    )

    return CalculationResult(
        result={
            "totalCost": total_rounded,
            "fuelCost": round_half_up(fuel_cost),
            "rentalCost": round_half_up(rental),
            "fuelNeeded": f"{fuel_litres} लीटर",
        },
        breakdown=breakdown,
        tips=tips,
    )


def labour(workers: float, daily_rate: float, days: float) -> CalculationResult:
    total = workers * daily_rate * days
    per_day = workers * daily_rate
    total_rounded = round_half_up(total)

    workers_text = format_number(workers)
    rate_text = format_number(daily_rate)
    days_text = format_number(days)

    breakdown = [
        Step(step=f"Number of workers: {workers_text}", stepHindi=f"मजदूरों की संख्या: {workers_text}", value=f"{workers_text} व्यक्ति"),
        Step(step=f"Daily wage per worker: ₹{rate_text}", stepHindi=f"प्रति मजदूर दिहाड़ी: ₹{rate_text}", value=f"₹{rate_text}"),
        Step(step=f"Number of days: {days_text}", stepHindi=f"दिनों की संख्या: {days_text}", value=f"{days_text} दिन"),
        Step(
            step=f"Total = {workers_text} × ₹{rate_text} × {days_text} days",
            stepHindi=f"कुल = {workers_text} × ₹{rate_text} × {days_text} दिन",
            value=rupees(total_rounded),
        ),
    ]

    if daily_rate > LABOUR_AVERAGE_RATE_CEILING:
        saving = f"आपकी rate ₹{rate_text} average (₹300-400) से ज्यादा है। SHG group या MNREGA workers से संपर्क करें।"
    else:
        saving = "आपकी rate market average के अंदर है। महिला SHG groups अक्सर ज्यादा reliable होती हैं।"

    tips = Tips(
        action=f"{workers_text} मजदूर × {days_text} दिन = {rupees(total_rounded)} मजदूरी देनी होगी।",
        saving=saving,
        safety="मजदूरी का record रखें। Group booking पर discount मिल सकता है।",
    )

    return CalculationResult(
        result={
            "totalLabourCost": total_rounded,
            "costPerDay": round_half_up(per_day),
            "costPerWorkerDay": round_half_up(daily_rate),
        },
        breakdown=breakdown,
        tips=tips,
    )


def storage(quantity: float, monthly_rate: float, days: float) -> CalculationResult:
    daily_rate = monthly_rate / 30
    total = round_half_up(quantity * daily_rate * days)
    cost_per_quintal = round_half_up(total / quantity)

    qty_text = format_number(quantity)
    monthly_text = format_number(monthly_rate)
    daily_text = fixed(daily_rate, 2)
    days_text = format_number(days)

    breakdown = [
        Step(step=f"Quantity: {qty_text} quintal", stepHindi=f"मात्रा: {qty_text} क्विंटल", value=f"{qty_text} क्विंटल"),
        Step(
            step=f"Monthly rate: ₹{monthly_text}/quintal",
            stepHindi=f"मासिक दर: ₹{monthly_text}/क्विंटल",
            value=f"₹{monthly_text}/माह",
        ),
        Step(step=f"Daily rate = ₹{monthly_text} ÷ 30", stepHindi=f"दैनिक दर = ₹{monthly_text} ÷ 30", value=f"₹{daily_text}/दिन"),
        Step(step=f"Storage days: {days_text}", stepHindi=f"भंडारण दिन: {days_text}", value=f"{days_text} दिन"),
        Step(
            step=f"Total = {qty_text} × ₹{daily_text} × {days_text}",
            stepHindi=f"कुल = {qty_text} × ₹{daily_text} × {days_text}",
            value=rupees(total),
        ),
    ]

    if cost_per_quintal > STORAGE_COST_ALERT_PER_QUINTAL:
        safety = f"⚠️ Storage cost ₹{cost_per_quintal}/क्विंटल बहुत ज्यादा है। तुरंत बेचना better हो सकता है।"
    else:
        safety = "Moisture और कीड़े से बचाव के लिए fumigation करवाएं। Warehouse receipt लेना न भूलें।"

    tips = Tips(
        action=f"{qty_text} क्विंटल को {days_text} दिन रखने का खर्च {rupees(total)} आएगा।",
        saving=(
            "Government warehouse (₹30-40/क्विंटल/माह) private (₹80-120) से सस्ता है। "
            "FCI approved गोदाम खोजें।"
        ),
        safety=safety,
    )

    return CalculationResult(
        result={
            "totalStorageCost": total,
            "costPerQuintal": cost_per_quintal,
            "costPerDay": round_half_up(quantity * daily_rate),
        },
        breakdown=breakdown,
        tips=tips,
    )
