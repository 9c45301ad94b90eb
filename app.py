"""
AR Makeup Try-On
Main Streamlit Application - skin tone matched lipstick, eyeshadow & blush
"""

import streamlit as st
from PIL import Image
import hashlib
import time

from config import (
    APP_TITLE, APP_ICON, VERSION,
    EFFECTS, EFFECT_LABELS, EFFECT_ORDER,
    MIN_INTENSITY, MAX_INTENSITY, MAX_IMAGE_SIZE,
    SKIN_TONE_CATEGORIES, get_total_shades
)
from face_detection_dl import LandmarkDetector, visualize_landmarks
from pipeline import MakeupSession
from utils import (
    pil_to_cv, cv_to_pil, resize_image, validate_image, get_image_info,
    composite_overlay, capture_photo, draw_status
)


st.set_page_config(
    page_title=APP_TITLE,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)


# Initialize session state
if 'session' not in st.session_state:
    st.session_state.session = MakeupSession()
    st.session_state.session.start()
if 'frame' not in st.session_state:
    st.session_state.frame = None
if 'frame_id' not in st.session_state:
    st.session_state.frame_id = None
if 'landmarks' not in st.session_state:
    st.session_state.landmarks = None
if 'processing_time' not in st.session_state:
    st.session_state.processing_time = None

session = st.session_state.session


@st.cache_resource
def load_detector():
    """Load the landmark model once per server process"""
    with st.spinner("🔮 Loading face landmark model..."):
        return LandmarkDetector(device='cpu')


try:
    detector = load_detector()
except Exception as e:
    st.error(f"❌ Error loading landmark model: {str(e)}")
    st.stop()


# ===== SIDEBAR: TONE LOCK =====
st.sidebar.title(f"{APP_ICON} Makeup Controls")
st.sidebar.markdown(f"**Version:** {VERSION}")
st.sidebar.markdown("---")

tone_locked = st.sidebar.checkbox(
    "🔒 Lock Skin Tone",
    value=session.tone_locked,
    help="Keep the current skin tone and palettes while the frame changes"
)
session.lock_tone(tone_locked)


# ===== MAIN CONTENT =====
st.title(APP_TITLE)
st.markdown(
    f"Take a selfie and try on makeup matched to your skin tone. "
    f"{len(SKIN_TONE_CATEGORIES)} skin tones • {get_total_shades()} shades"
)
st.markdown("---")

col1, col2 = st.columns([1, 1])

# ===== LEFT COLUMN: CAMERA / UPLOAD =====
with col1:
    st.subheader("📸 Your Photo")

    source = st.camera_input("Take a selfie")
    if source is None:
        source = st.file_uploader(
            "...or upload one",
            type=['jpg', 'jpeg', 'png'],
            help="A clear, front-facing photo works best"
        )

    if source is not None:
        data = source.getvalue()
        frame_id = hashlib.md5(data).hexdigest()

        if frame_id != st.session_state.frame_id:
            try:
                frame = pil_to_cv(Image.open(source))

                is_valid, message = validate_image(frame)
                if not is_valid:
                    st.error(f"❌ {message}")
                    st.stop()

                frame = resize_image(frame, MAX_IMAGE_SIZE)

                start_time = time.time()
                with st.spinner("🔍 Detecting face landmarks..."):
                    landmarks = detector.detect_landmarks(frame)
                st.session_state.processing_time = time.time() - start_time

                st.session_state.frame = frame
                st.session_state.frame_id = frame_id
                st.session_state.landmarks = landmarks

            except Exception as e:
                st.error(f"❌ Error loading image: {str(e)}")
                st.stop()

        img_info = get_image_info(st.session_state.frame)
        st.info(f"📏 Image size: {img_info['width']} x {img_info['height']} pixels")
    else:
        st.session_state.frame = None
        st.session_state.frame_id = None
        st.session_state.landmarks = None
        st.info("👆 Take a selfie or upload a photo to get started")


frame = st.session_state.frame
landmarks = st.session_state.landmarks

# First pass reports the tone so the palettes below are current
report = session.tick(frame, landmarks) if frame is not None else None
palette = report['palette'] if report else {effect: [] for effect in EFFECTS}


# ===== SIDEBAR: EFFECT CONTROLS =====
category = report['category'] if report else None

for effect in EFFECTS:
    config = session.effects[effect]
    colors = palette.get(effect) or []

    with st.sidebar.expander(EFFECT_LABELS[effect], expanded=True):
        enabled = st.checkbox("Apply", value=config.enabled, key=f"{effect}_enabled")
        session.set_enabled(effect, enabled)

        if colors:
            index = colors.index(config.color) if config.color in colors else 0
            color = st.radio(
                "Shade",
                colors,
                index=index,
                horizontal=True,
                key=f"{effect}_color_{category}"
            )
            session.set_color(effect, color)

            st.markdown(
                f"""
                <div style="
                    background-color: {color};
                    width: 100%;
                    height: 30px;
                    border-radius: 8px;
                    border: 2px solid #ddd;
                "></div>
                """,
                unsafe_allow_html=True
            )
        else:
            st.caption("Shades appear once a face is detected")

        intensity = st.slider(
            "Intensity",
            MIN_INTENSITY, MAX_INTENSITY,
            config.intensity,
            key=f"{effect}_intensity"
        )
        session.set_intensity(effect, intensity)

st.sidebar.markdown("---")
st.sidebar.subheader("⚙️ Display Options")
show_landmarks = st.sidebar.checkbox("📍 Show Landmarks", value=False)
show_processing_time = st.sidebar.checkbox("⏱️ Show Processing Time", value=True)

st.sidebar.markdown(f"""
### 💡 Tips for Best Results
- Even, natural lighting
- Face the camera straight on
- Keep hair away from forehead and cheeks

### 🖌️ Paint Order
{' → '.join(EFFECT_LABELS[e] for e in EFFECT_ORDER)}
""")


# ===== RIGHT COLUMN: RESULT =====
with col2:
    st.subheader("✨ Result")

    if frame is not None:
        # Second pass paints with the controls chosen above
        report = session.tick(frame, landmarks)
        overlay = session.surface.pixels

        preview = composite_overlay(frame, overlay)
        if show_landmarks and landmarks is not None:
            preview = visualize_landmarks(preview, landmarks)
        preview = draw_status(
            preview, session.face_detected, report['category'], session.tone_locked
        )

        st.image(cv_to_pil(preview), use_container_width=True)

        if not session.face_detected:
            st.error("❌ No face detected! Please try:")
            st.markdown("""
            - A well-lit photo
            - A clearly visible, front-facing face
            - Removing obstructions (hair, hands)
            """)
        else:
            st.success(f"✅ Skin tone: **{report['category']}**")

            if show_processing_time and st.session_state.processing_time:
                st.metric(
                    label="Landmark Detection",
                    value=f"{st.session_state.processing_time:.2f}s"
                )

            tone_slug = (report['category'] or 'unknown').lower().replace('/', '_')
            st.download_button(
                label="📥 Download Photo",
                data=capture_photo(frame, overlay),
                file_name=f"ar-makeup-photo-{tone_slug}.png",
                mime="image/png",
                use_container_width=True
            )

            with st.expander("🔍 Tone Details"):
                details = {"Skin Tone": report['category']}
                if session.last_result is not None:
                    r, g, b = session.last_result.avg_rgb
                    h, s, v = session.last_result.avg_hsv
                    details["Average RGB"] = f"({r}, {g}, {b})"
                    details["Average HSV"] = f"({h:.1f}°, {s:.1f}%, {v:.1f}%)"
                for effect in EFFECTS:
                    config = session.effects[effect]
                    state = "on" if config.enabled else "off"
                    details[effect.title()] = f"{config.color} ({config.intensity}%, {state})"
                st.json(details)
    else:
        st.info("📸 Take or upload a photo first to see results here")

        st.markdown("""
        ### 🎨 What happens next?
        1. **Landmark Detection**: 68 facial points are mapped
        2. **Skin Tone Analysis**: forehead and cheeks are sampled and classified
        3. **Palette Matching**: shades suited to your tone are suggested
        4. **Overlay**: lipstick, eyeshadow and blush are painted on your face
        """)


# ===== FOOTER =====
st.markdown("---")

st.markdown("""
<div style="text-align: center; color: #666; padding: 20px;">
    <p style="font-size: 1.1em;"><strong>💄 AR Makeup Try-On</strong></p>
    <p style="font-size: 0.9em;">Built with Streamlit, PyTorch & OpenCV • Version {}</p>
</div>
""".format(VERSION), unsafe_allow_html=True)
