DIAGNOSIS_INSTRUCTION = """
Task: diagnose the crop problem shown in the photo.
- Identify the most likely pest, disease or deficiency and how sure you are.
- Describe the visible symptoms that support the diagnosis.
- Give organic and biological treatments first, then chemical options as a last
  resort with dosage and safety precautions.
- End with prevention steps for the next season.
Write the report in Markdown.
""".strip()

DIAGNOSIS_USER_TEMPLATE = "Symptoms reported by the farmer: {symptoms}"

IRRIGATION_INSTRUCTION = """
Task: build an irrigation plan for the next 7 days.
- Use the crop, its growth stage and the current soil moisture.
- Say how much water to give, when, and which method saves the most water.
- Mention signs of over and under watering to watch for.
Write the plan in Markdown.
""".strip()

IRRIGATION_USER_TEMPLATE = """
Crop: {crop}
Growth stage: {stage}
Soil moisture: {moisture}%
Location: {location}
""".strip()

SOIL_ANALYSIS_INSTRUCTION = """
Task: analyze the soil health profile.
If an image is provided:
1. Identify visual indicators of nutrient deficiency (coloration, texture).
2. Estimate organic matter content visually.
3. Determine soil texture with a confidence score.
4. Provide biological recommendations for improvement.
Scores (health_score, normalized_n, normalized_p, normalized_k) are 0-100.
""".strip()

SOIL_ANALYSIS_USER_TEMPLATE = """
Location: {location}
pH: {ph}
Organic matter: {organic_matter}%
Soil type: {soil_type}
""".strip()

FERTILIZER_SCHEDULE_INSTRUCTION = """
Task: give a fertilizer schedule for the rest of the season.
List each application as a task with material, dosage per acre and timing.
Prefer compost, green manure and bio-fertilizers.
""".strip()

FERTILIZER_SCHEDULE_USER_TEMPLATE = """
Crop: {crop}
Growth stage: {stage}
Soil pH: {soil_ph}
""".strip()

PEST_RISK_INSTRUCTION = """
Task: assess the pest and disease risk for the crop in the coming weeks.
Look up current outbreak reports and the weather outlook for the location.
Rank the threats by likelihood (0-100) and give preventive measures, organic
and biological first.
""".strip()

PEST_RISK_USER_TEMPLATE = """
Crop: {crop}
Growth stage: {stage}
Location: {location}
""".strip()

CROP_PLAN_INSTRUCTION = """
Task: plan what to grow.
- mode "recommend": suggest the best crops for the land with a match score (0-100).
- mode "evaluate": judge the crop the farmer has in mind and suggest alternatives.
- mode "rotation": build a rotation plan around the farmer's crop.
Explain the reasoning in the analysis field using Markdown.
""".strip()

CROP_PLAN_USER_TEMPLATE = """
Mode: {mode}
Soil type: {soil_type}
Farmer's crop: {crop_input}
Filters: {filters}
Location: {location}
""".strip()
