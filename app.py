import io
import zipfile
from io import BytesIO

import streamlit as st
from PIL import Image

from bmp_codec import Bitmap
from image_utils import (
    bitmap_to_image,
    create_preview_image,
    crop_to_even,
    download_button,
    image_to_shares,
    load_bitmap,
    parse_share_index,
    shares_to_image,
)
from sss_config import SharingConfig
from sss_errors import SharingError
from sss_logging import configure_logging
from sss_pipeline import run_experiment

configure_logging("INFO")

# Set page configuration
st.set_page_config(
    page_title="Shamir's Secret Sharing Image Tool",
    page_icon="🔐",
    layout="wide",
)

# Custom CSS for styling
st.markdown("""
<style>
    .stApp {
        max-width: 1200px;
        margin: 0 auto;
    }
    h1, h2, h3 {
        color: #2b2d42;
    }
    .info-box {
        background-color: #8d99ae;
        color: white;
        padding: 1rem;
        border-radius: 5px;
        margin-bottom: 1rem;
    }
    .success-box {
        background-color: #2b2d42;
        color: white;
        padding: 1rem;
        border-radius: 5px;
        margin-bottom: 1rem;
    }
    .error-box {
        background-color: #ef233c;
        color: white;
        padding: 1rem;
        border-radius: 5px;
        margin-bottom: 1rem;
    }
</style>
""", unsafe_allow_html=True)

CONFIG = SharingConfig()


def show_box(kind, text):
    st.markdown(f'<div class="{kind}-box">{text}</div>', unsafe_allow_html=True)


# Header
st.title("🔐 Shamir's Secret Sharing Image Tool")
show_box("info", (
    f"Images are split into {CONFIG.num_shares} shares over GF(257); any "
    f"{CONFIG.threshold} of them reconstruct the original. Shares are 24-bit BMP files."
))

tab1, tab2, tab3 = st.tabs([
    "📊 Split Image (Encrypt)",
    "🔄 Combine Shares (Decrypt)",
    "🔍 Homomorphic Downscale",
])

with tab1:
    st.header("Split Image")

    uploaded_file = st.file_uploader("Upload an image (BMP, JPG, PNG)", type=["bmp", "jpg", "jpeg", "png"])

    if uploaded_file is not None:
        try:
            image = Image.open(uploaded_file)
            st.image(image, caption="Uploaded Image", use_container_width=True)

            if st.button("Encrypt and Create Shares"):
                with st.spinner("Generating shares..."):
                    progress_bar = st.progress(0)
                    bitmap = load_bitmap(image)
                    shares = image_to_shares(
                        bitmap, CONFIG,
                        progress_callback=lambda p: progress_bar.progress(p),
                    )

                show_box("success", "Success! Shares have been generated.")
                st.subheader("Generated Shares")

                cols = st.columns(len(shares))
                for col, (x, share) in zip(cols, shares):
                    with col:
                        st.image(create_preview_image(share), caption=f"Share {x}", use_container_width=True)
                        st.markdown(
                            download_button(share.to_bytes(), f"share_{x}.bmp", f"Download Share {x} (.bmp)"),
                            unsafe_allow_html=True,
                        )

                # Create ZIP with all shares
                zip_buffer = BytesIO()
                with zipfile.ZipFile(zip_buffer, 'w') as zip_file:
                    for x, share in shares:
                        zip_file.writestr(f"share_{x}.bmp", share.to_bytes())

                st.markdown("### Download All Shares")
                st.markdown(
                    download_button(zip_buffer.getvalue(), "all_shares.zip", "Download All Shares (.zip)"),
                    unsafe_allow_html=True,
                )

        except (SharingError, OSError) as e:
            show_box("error", f"Error: An issue occurred while generating shares: {e}")
    else:
        st.info("Please upload an image file.")

with tab2:
    st.header("Combine Shares")
    show_box("info", (
        f"Upload at least {CONFIG.threshold} shares. Share filenames should be in the "
        "format 'share_X.bmp', where X is the share number."
    ))

    uploaded_shares = st.file_uploader(
        f"Upload Shares (At least {CONFIG.threshold})",
        type=["bmp"],
        accept_multiple_files=True,
    )

    if uploaded_shares:
        loaded = []
        for share_file in uploaded_shares:
            idx = parse_share_index(share_file.name)
            if idx is None:
                show_box("error", f"Cannot read the share number from '{share_file.name}'.")
                continue
            try:
                loaded.append((idx, Bitmap.from_bytes(share_file.getvalue())))
            except SharingError as e:
                show_box("error", f"Error loading share: {share_file.name} - {e}")

        if len(loaded) < CONFIG.threshold:
            show_box("error", (
                f"You need to upload at least {CONFIG.threshold} shares to combine the image. "
                f"You have uploaded {len(loaded)}."
            ))
        elif st.button("Combine and Show Image"):
            try:
                with st.spinner("Combining shares..."):
                    combined = shares_to_image(loaded, CONFIG)

                show_box("success", "Combine successful! Original image has been reconstructed.")
                st.image(bitmap_to_image(combined), caption="Reconstructed Image", use_container_width=True)
                st.markdown(
                    download_button(combined.to_bytes(), "recovered_image.bmp", "Download Original Image (.bmp)"),
                    unsafe_allow_html=True,
                )
            except SharingError as e:
                show_box("error", f"Error: An issue occurred while combining shares: {e}")
    else:
        st.info("Please upload the image shares you want to combine.")

with tab3:
    st.header("Homomorphic Downscale")
    show_box("info", (
        "The image is downscaled directly (integer 2x2 average) and, separately, split into "
        "shares that are downscaled in GF(257) and then reconstructed. The two results are "
        "compared with the sum of absolute errors."
    ))

    experiment_file = st.file_uploader(
        "Upload an image (BMP, JPG, PNG)", type=["bmp", "jpg", "jpeg", "png"], key="experiment_upload"
    )
    crop = st.checkbox("Crop odd dimensions to even", value=True)
    col1, col2 = st.columns(2)
    with col1:
        first_x = st.selectbox("First share", CONFIG.x_values, index=0)
    with col2:
        second_x = st.selectbox("Second share", CONFIG.x_values, index=len(CONFIG.x_values) - 1)

    if experiment_file is not None and st.button("Run Experiment"):
        try:
            image = Image.open(experiment_file)
            if crop:
                image = crop_to_even(image)
            with st.spinner("Running..."):
                result = run_experiment(load_bitmap(image), CONFIG, reconstruct_xs=(first_x, second_x))

            cols = st.columns(2)
            with cols[0]:
                st.image(bitmap_to_image(result.original_downscaled), caption="I_o (plaintext downscale)",
                         use_container_width=True)
            with cols[1]:
                st.image(bitmap_to_image(result.reconstructed), caption="I_s (from downscaled shares)",
                         use_container_width=True)

            st.metric("Sum Absolute Error (SAE)", result.sae)
            st.metric("Mean Absolute Error per byte", f"{result.mae:.4f}")

            buffer = io.BytesIO()
            with zipfile.ZipFile(buffer, 'w') as zip_file:
                zip_file.writestr("I_o_original_downscaled.bmp", result.original_downscaled.to_bytes())
                zip_file.writestr("I_s_reconstructed_downscaled.bmp", result.reconstructed.to_bytes())
                for x, share in result.downscaled_shares:
                    zip_file.writestr(f"share_I_s_{x}.bmp", share.to_bytes())
            st.markdown(
                download_button(buffer.getvalue(), "homomorphic_output.zip", "Download Results (.zip)"),
                unsafe_allow_html=True,
            )
        except (SharingError, OSError) as e:
            show_box("error", f"Error: {e}")

# Footer
st.markdown("""
---
<p style="text-align: center; color: #8d99ae;">
Shamir's Secret Sharing Image Encryption/Decryption App
</p>
""", unsafe_allow_html=True)
