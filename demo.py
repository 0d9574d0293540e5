import marimo

__generated_with = "0.17.6"
app = marimo.App(width="full")


@app.cell
def _():
    import marimo as mo
    import numpy as np

    from kmeans_compressor import CompressionConfig, compress_pixels
    from kmeans_compressor.data_loader import load_pixels
    from kmeans_compressor.viz import plot_compression_result, plot_palette
    return (
        CompressionConfig,
        compress_pixels,
        load_pixels,
        mo,
        np,
        plot_compression_result,
        plot_palette,
    )


@app.cell
def _(mo):
    mo.md("""
    # Compresión de Imágenes por K-Means

    Este notebook reduce el número de colores de una imagen agrupando sus píxeles
    en el espacio RGB con **K-Means** y reemplazando cada píxel por el color medio
    de su cluster.

    El algoritmo ejecuta un número fijo de iteraciones:
    1. **Asignación**: cada píxel se asigna al centroide más cercano (distancia euclidiana)
    2. **Actualización**: cada centroide pasa a ser la media de sus píxeles; un cluster
       vacío conserva su centroide anterior
    """)
    return


@app.cell
def _(mo):
    image_path = mo.ui.text(value="Imagen.png", label="Imagen")
    n_colors = mo.ui.slider(start=1, stop=64, value=16, label="Colores (K)")
    n_iterations = mo.ui.slider(start=0, stop=50, value=10, label="Iteraciones")
    seed = mo.ui.number(start=0, stop=10_000, value=42, label="Semilla")
    mo.hstack([image_path, n_colors, n_iterations, seed])
    return image_path, n_colors, n_iterations, seed


@app.cell
def _(image_path, load_pixels):
    # Cargar imagen como lista plana de píxeles (N, 3)
    width, height, pixels = load_pixels(image_path.value)
    return height, pixels, width


@app.cell
def _(
    CompressionConfig,
    compress_pixels,
    n_colors,
    n_iterations,
    pixels,
    seed,
):
    config = CompressionConfig(
        n_clusters=n_colors.value,
        n_iter=n_iterations.value,
        random_state=int(seed.value)
    )
    result = compress_pixels(pixels, config)
    return (result,)


@app.cell
def _(height, pixels, plot_compression_result, result, width):
    fig_result = plot_compression_result(pixels, result, width, height)
    fig_result
    return


@app.cell
def _(mo, np, pixels, result):
    n_original = len(np.unique(pixels, axis=0))

    mo.md(f"""
    ## Resultados

    - Colores originales: {n_original}
    - Colores tras la compresión: {result.n_colors}
    - Iteraciones ejecutadas: {result.kmeans.n_iter}
    - Inercia final J(V): {result.kmeans.inertia:,.0f}
    - Asignaciones estables en la última iteración: {result.kmeans.converged}
    """)
    return


@app.cell
def _(plot_palette, result):
    fig_palette = plot_palette(result.palette, result.kmeans.cluster_sizes())
    fig_palette
    return


if __name__ == "__main__":
    app.run()
