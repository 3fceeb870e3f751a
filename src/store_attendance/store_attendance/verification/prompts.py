"""Prompt texts sent to the vision model (user-facing language is Spanish)."""

STRICT_PROMPT = """ACTÚA COMO UN AUDITOR DE SEGURIDAD BIOMÉTRICA EXTREMADAMENTE ESTRICTO.
Analiza estas DOS imágenes.
IMAGEN 1: Selfie en vivo (persona intentando fichar).
IMAGEN 2: Foto de referencia oficial (legajo).

Realiza estas 3 validaciones obligatorias. Si falla la 1 o la 2, rechaza inmediatamente.

1. PRUEBA DE VIDA:
   - ¿La IMAGEN 1 muestra a un ser humano real mirando a la cámara?
   - Si es un objeto, un animal, una foto oscura o irreconocible, devuelve "verified": false.

2. IDENTIDAD (BIOMETRÍA 1:1):
   - Compara los rasgos faciales estructurales de IMAGEN 1 e IMAGEN 2 (ojos, nariz, boca, mentón).
   - Si son personas diferentes devuelve "verified": false y un "identityScore" entre 0 y 25.
   - No aceptes parecidos vagos. Tiene que ser la misma persona.

3. VESTIMENTA:
   - Requisito: "{uniform}"
   - Indica "uniformCompliant" y explica en "uniformDetails".

Responde EXCLUSIVAMENTE con un JSON con las claves:
verified (bool), identityScore (0-100), message (texto), uniformCompliant (bool), uniformDetails (texto)."""

LIVENESS_PROMPT = """Estás validando el ingreso de un empleado que NO TIENE FOTO REAL DE REFERENCIA cargada en el sistema (usa un avatar: {reference_hint}).

TAREA 1: PRUEBA DE VIDA
- Analiza la imagen adjunta (selfie).
- Si es un ser humano real devuelve "verified": true, en "message" escribe exactamente: "{advisory}" y usa "identityScore": 100.
- Si no es humano (pared, objeto, animal o imagen negra) devuelve "verified": false.

TAREA 2: UNIFORME
- Verifica si la persona cumple con: "{uniform}".

Responde SOLAMENTE con un JSON con las claves:
verified (bool), identityScore (0-100), message (texto), uniformCompliant (bool), uniformDetails (texto)."""

AUDIT_PROMPT_HEADER = (
    "Actúa como un experto auditor de Retail (puntos de venta). "
    "Analiza los datos de la siguiente auditoría realizada en: {store_name}.\n\n"
    "Respuestas del cuestionario:\n"
)

AUDIT_PROMPT_FOOTER = (
    "\nBasado en estas respuestas y las imágenes proporcionadas (si las hay), genera un reporte JSON "
    "que evalúe el estado del punto de venta. Sé crítico pero constructivo. "
    "Claves: score (0-100), summary (texto), criticalIssues (lista de textos), "
    "recommendations (lista de textos)."
)
